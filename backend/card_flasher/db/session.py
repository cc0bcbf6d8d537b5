import logging
import threading
from contextlib import contextmanager
from typing import Generator, Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from card_flasher.core.errors import DatabaseNotConfiguredError
from card_flasher.db.base import Base

logger = logging.getLogger(__name__)

MISSING_DB_ENV_MESSAGE = "Missing DATABASE_URL/POSTGRES_URL. The database is not configured."


class Database:
    """Owns the engine, the session factory and the create-schema-once gate."""

    def __init__(self, url: str, *, echo: bool = False):
        self.url = url
        if url.startswith("sqlite"):
            # one shared connection so in-memory databases survive across sessions
            self.engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(url, echo=echo, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self._schema_lock = threading.Lock()
        self._schema_ready = False

    @property
    def schema_ready(self) -> bool:
        return self._schema_ready

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        with self._schema_lock:
            if self._schema_ready:
                return
            import card_flasher.models  # noqa: F401  registers tables on Base.metadata

            logger.info("Creating database schema if missing")
            Base.metadata.create_all(self.engine)
            self._schema_ready = True

    @contextmanager
    def session(self) -> Iterator[Session]:
        self.ensure_schema()
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseNotConfiguredError(MISSING_DB_ENV_MESSAGE)
    return database


def get_db(request: Request) -> Generator[Session, None, None]:
    database = get_database(request)
    with database.session() as db:
        yield db
