from fastapi import Depends, Request
from sqlalchemy.orm import Session

from card_flasher.api.deps import get_settings
from card_flasher.auth.cookies import get_session_token
from card_flasher.core.config import Settings
from card_flasher.core.errors import UnauthorizedError
from card_flasher.db.session import get_db
from card_flasher.repositories.dto import CurrentUser
from card_flasher.repositories.session_repo import SessionRepository


def require_user(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    """
    Resolves the session cookie to the current user.
    Any protected route depends on this, so a bad session stops the request with 401
    before the handler touches anything.
    """
    token = get_session_token(request, settings)
    if not token:
        raise UnauthorizedError("Unauthorized")

    user = SessionRepository(db, settings).resolve(token)
    if user is None:
        # unknown or expired (expired rows are deleted by resolve)
        raise UnauthorizedError("Unauthorized")

    return user
