from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from card_flasher.auth.dependencies import require_user
from card_flasher.core.result import unwrap
from card_flasher.db.session import get_db
from card_flasher.repositories.dto import CurrentUser
from card_flasher.repositories.group_repo import GroupRepository
from card_flasher.schemas.group import GroupCreate, GroupCreated, GroupListResponse, GroupResponse

router = APIRouter()


# -------------------------------
# List groups with card counts
# -------------------------------
@router.get("", response_model=GroupListResponse)
def list_groups(user: CurrentUser = Depends(require_user), db: Session = Depends(get_db)):
    return GroupListResponse.model_validate(GroupRepository(db).list_groups(user.id))


# -------------------------------
# Create a group or return the existing one
# -------------------------------
@router.post("", response_model=GroupCreated)
def create_group(data: GroupCreate, user: CurrentUser = Depends(require_user), db: Session = Depends(get_db)):
    group = unwrap(GroupRepository(db).create_group(user.id, data.name))
    return GroupCreated(group=GroupResponse.model_validate(group))
