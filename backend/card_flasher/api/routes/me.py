from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from card_flasher.api.deps import get_settings
from card_flasher.auth.dependencies import require_user
from card_flasher.core.config import Settings
from card_flasher.db.session import get_db
from card_flasher.repositories.dto import CurrentUser
from card_flasher.repositories.user_repo import UserRepository
from card_flasher.schemas.auth import UpdateMeRequest, UserResponse

router = APIRouter()


@router.get("", response_model=UserResponse)
def get_me(user: CurrentUser = Depends(require_user)):
    return UserResponse.model_validate(user)


@router.patch("", response_model=UserResponse)
def update_me(
    data: UpdateMeRequest,
    user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    language = UserRepository(db, settings).update_target_language(user.id, data.target_language)
    return UserResponse(id=user.id, email=user.email, target_language=language)
