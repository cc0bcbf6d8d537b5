import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from card_flasher.core.config import Settings, settings as default_settings
from card_flasher.core.errors import ConflictError
from card_flasher.core.result import Err, Ok, Result
from card_flasher.core.security import normalize_email
from card_flasher.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or default_settings

    def get_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(User.email == normalize_email(email))
        ).scalar_one_or_none()

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def create(self, *, email: str, password_hash: str) -> Result[User, ConflictError]:
        normalized = normalize_email(email)
        if self.get_by_email(normalized) is not None:
            return Err(ConflictError("User already exists."))

        user = User(
            email=normalized,
            password_hash=password_hash,
            target_language=self.settings.DEFAULT_TARGET_LANGUAGE,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # registered concurrently between the check and the insert
            self.db.rollback()
            return Err(ConflictError("User already exists."))
        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return Ok(user)

    def update_target_language(self, user_id: int, language: str) -> str:
        cleaned = language.strip()
        self.db.execute(
            update(User).where(User.id == user_id).values(target_language=cleaned)
        )
        self.db.commit()
        return cleaned
