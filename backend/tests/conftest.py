"""Pytest fixtures: in-memory SQLite and a fake content generator."""
import os
import logging

# fast hashing and no real database before anything imports settings
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from card_flasher.api.deps import get_content_generator
from card_flasher.core.errors import UpstreamError
from card_flasher.core.result import Err, Ok
from card_flasher.db.session import Database
from card_flasher.main import create_app
from card_flasher.repositories.dto import CardContent

from helpers import register

logging.getLogger("sqlalchemy").setLevel(logging.ERROR)


class FakeContentGenerator:
    """Stands in for the Gemini-backed generator.

    Every phrase becomes a card whose translation is tagged with the target
    language. ``renames`` maps an input phrase to the base form the model
    would return, ``fail_on_call`` makes the n-th call (1-based) fail.
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self.renames: dict[str, str] = {}
        self.fail_on_call: int | None = None
        self.examples = ["First example.", "Second example."]

    def _should_fail(self) -> bool:
        return self.fail_on_call is not None and len(self.calls) == self.fail_on_call

    def generate_cards(self, phrases, target_language):
        self.calls.append(list(phrases))
        if self._should_fail():
            return Err(UpstreamError("Google model returned empty response."))
        return Ok([
            CardContent(
                phrase=self.renames.get(phrase, phrase),
                translation=f"{phrase} ({target_language})",
                description_en=f"Meaning of {phrase}.",
                examples_en=[f"I use {phrase} here.", f"We say {phrase} there."],
            )
            for phrase in phrases
        ])

    def generate_examples(self, phrase):
        self.calls.append([phrase])
        if self._should_fail():
            return Err(UpstreamError("Google model returned empty response."))
        return Ok(list(self.examples))


@pytest.fixture(scope="function")
def database():
    db = Database("sqlite://")
    db.ensure_schema()
    yield db
    db.dispose()


@pytest.fixture(scope="function")
def generator() -> FakeContentGenerator:
    return FakeContentGenerator()


@pytest.fixture(scope="function")
def app(database, generator):
    app = create_app(database=database)
    app.dependency_overrides[get_content_generator] = lambda: generator
    yield app
    app.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    with TestClient(app) as client:
        yield client


@pytest.fixture(scope="function")
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture(scope="function")
def auth_client(client: TestClient) -> TestClient:
    """Client with a registered user's session cookie."""
    register(client)
    return client


@pytest.fixture(scope="function")
def other_client(app) -> TestClient:
    """Second user on the same app, with its own cookie jar."""
    with TestClient(app) as other:
        register(other)
        yield other

