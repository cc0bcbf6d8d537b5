from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from card_flasher.core.config import Settings, settings as default_settings
from card_flasher.core.security import create_session_token, now_ms, session_expiry_ms
from card_flasher.models.session import UserSession
from card_flasher.models.user import User
from card_flasher.repositories.dto import CurrentUser


class SessionRepository:
    """Session rows are checked for expiry on read; nothing sweeps them in the background."""

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or default_settings

    def create(self, user_id: int) -> UserSession:
        session = UserSession(
            token=create_session_token(),
            user_id=user_id,
            expires_at=session_expiry_ms(days=self.settings.SESSION_DAYS),
        )
        self.db.add(session)
        self.db.commit()
        return session

    def get(self, token: str) -> UserSession | None:
        return self.db.get(UserSession, token)

    def resolve(self, token: str, *, now: int | None = None) -> CurrentUser | None:
        row = self.db.execute(
            select(User.id, User.email, User.target_language, UserSession.expires_at)
            .join(User, User.id == UserSession.user_id)
            .where(UserSession.token == token)
        ).first()
        if row is None:
            return None

        current_ms = now if now is not None else now_ms()
        if row.expires_at <= current_ms:
            self.delete(token)
            return None

        return CurrentUser(id=row.id, email=row.email, target_language=row.target_language)

    def delete(self, token: str) -> None:
        self.db.execute(delete(UserSession).where(UserSession.token == token))
        self.db.commit()
