import logging

from sqlalchemy.orm import Session

from card_flasher.core.config import Settings, settings as default_settings
from card_flasher.core.errors import CardFlasherError, UnauthorizedError
from card_flasher.core.result import Err, Ok, Result
from card_flasher.core.security import hash_password, verify_password
from card_flasher.models.session import UserSession
from card_flasher.repositories.session_repo import SessionRepository
from card_flasher.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


class AuthService:
    def __init__(self, db: Session, settings: Settings | None = None):
        self.settings = settings or default_settings
        self.users = UserRepository(db, self.settings)
        self.sessions = SessionRepository(db, self.settings)

    def register(self, email: str, password: str) -> Result[UserSession, CardFlasherError]:
        password_hash = hash_password(password, self.settings.PASSWORD_HASH_ROUNDS)
        created = self.users.create(email=email, password_hash=password_hash)
        if isinstance(created, Err):
            return created
        return Ok(self.sessions.create(created.value.id))

    def login(self, email: str, password: str) -> Result[UserSession, UnauthorizedError]:
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login attempt")
            return Err(UnauthorizedError(INVALID_CREDENTIALS))
        return Ok(self.sessions.create(user.id))

    def logout(self, token: str | None) -> None:
        if token:
            self.sessions.delete(token)
