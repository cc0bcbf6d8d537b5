from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from card_flasher.api.deps import get_settings
from card_flasher.auth.cookies import attach_session_cookie, clear_session_cookie, get_session_token
from card_flasher.core.config import Settings
from card_flasher.core.result import unwrap
from card_flasher.db.session import get_db
from card_flasher.schemas.auth import LoginRequest, OkResponse, RegisterRequest
from card_flasher.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=OkResponse)
def register(
    data: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    session = unwrap(AuthService(db, settings).register(data.email, data.password))
    attach_session_cookie(response, session.token, session.expires_at, settings)
    return OkResponse()


@router.post("/login", response_model=OkResponse)
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    session = unwrap(AuthService(db, settings).login(data.email, data.password))
    attach_session_cookie(response, session.token, session.expires_at, settings)
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    AuthService(db, settings).logout(get_session_token(request, settings))
    clear_session_cookie(response, settings)
    return OkResponse()
