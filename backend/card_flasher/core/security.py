import secrets
import time
import uuid
from functools import lru_cache

from passlib.context import CryptContext

from card_flasher.core.config import settings

MS_PER_DAY = 24 * 60 * 60 * 1000


@lru_cache(maxsize=None)
def password_context(rounds: int) -> CryptContext:
    return CryptContext(
        schemes=["bcrypt_sha256"],
        deprecated="auto",
        bcrypt_sha256__rounds=rounds,
    )


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str, rounds: int | None = None) -> str:
    return password_context(rounds or settings.PASSWORD_HASH_ROUNDS).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # the cost is read from the hash itself
    try:
        return password_context(settings.PASSWORD_HASH_ROUNDS).verify(plain_password, hashed_password)
    except ValueError:
        # unknown or corrupted hash
        return False


def create_session_token() -> str:
    return f"{uuid.uuid4()}-{secrets.token_hex(16)}"


def now_ms() -> int:
    return int(time.time() * 1000)


def session_expiry_ms(now: int | None = None, days: int | None = None) -> int:
    start = now if now is not None else now_ms()
    return start + (days or settings.SESSION_DAYS) * MS_PER_DAY
