import runpy

import pytest
import uvicorn
from fastapi.testclient import TestClient
from sqlalchemy import select

from card_flasher.api.deps import get_content_generator
from card_flasher.core.config import Settings
from card_flasher.core.security import MS_PER_DAY, now_ms
from card_flasher.main import create_app
from card_flasher.models.session import UserSession
from card_flasher.models.user import User

from helpers import PASSWORD, generate, register


def make_unconfigured_client() -> TestClient:
    settings = Settings(DATABASE_URL=None, POSTGRES_URL=None, GOOGLE_API_KEY=None)
    return TestClient(create_app(settings=settings))


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestDatabaseGuard:
    """Requests without a configured database"""

    def test_health_still_works(self):
        with make_unconfigured_client() as client:
            assert client.get("/health").status_code == 200

    def test_api_answers_503_json(self):
        with make_unconfigured_client() as client:
            response = client.get("/cards")
            assert response.status_code == 503
            assert "DATABASE_URL" in response.json()["detail"]

    def test_auth_answers_503(self):
        with make_unconfigured_client() as client:
            response = client.post("/auth/login", json={"email": "a@example.com", "password": "password123"})
            assert response.status_code == 503

    def test_browser_gets_guard_page(self):
        with make_unconfigured_client() as client:
            response = client.get("/me", headers={"Accept": "text/html,application/xhtml+xml"})
            assert response.status_code == 503
            assert "text/html" in response.headers["content-type"]
            assert "Database is not configured" in response.text


class TestSettings:
    def test_postgres_scheme_is_rewritten(self):
        settings = Settings(DATABASE_URL="postgres://u:p@host/db")
        assert settings.database_url == "postgresql+psycopg2://u:p@host/db"

    def test_postgres_url_fallback(self):
        settings = Settings(DATABASE_URL=None, POSTGRES_URL="postgresql://u:p@host/db")
        assert settings.database_url == "postgresql://u:p@host/db"

    def test_cors_origins(self):
        settings = Settings(CORS_ORIGINS="http://a.test, http://b.test,")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_schema_is_created_once(database):
    assert database.schema_ready is True
    database.ensure_schema()
    assert database.schema_ready is True


class TestInjectedSettings:
    """create_app(settings=...) reaches cookies, sessions, users and generation"""

    @pytest.fixture
    def production_client(self, database, generator):
        settings = Settings(
            DATABASE_URL="sqlite://",
            ENVIRONMENT="production",
            SESSION_DAYS=1,
            SESSION_COOKIE_NAME="cf_session",
            DEFAULT_TARGET_LANGUAGE="German",
            GENERATION_BATCH_SIZE=2,
            PASSWORD_HASH_ROUNDS=5,
        )
        app = create_app(settings=settings, database=database)
        app.dependency_overrides[get_content_generator] = lambda: generator
        # Secure cookies are only sent back over https
        with TestClient(app, base_url="https://testserver") as client:
            yield client

    def test_session_cookie_uses_settings(self, production_client: TestClient, database):
        response = production_client.post("/auth/register", json={"email": "prod@example.com", "password": PASSWORD})
        assert response.status_code == 200

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("cf_session=")
        assert "secure" in cookie.lower()
        assert "card_flasher_session" not in cookie

        with database.session() as db:
            session = db.execute(select(UserSession)).scalar_one()
            user = db.execute(select(User)).scalar_one()
        assert abs(session.expires_at - (now_ms() + MS_PER_DAY)) < 60_000
        assert "r=5$" in user.password_hash

    def test_user_defaults_and_batches_use_settings(self, production_client: TestClient, generator):
        register(production_client)
        assert production_client.get("/me").json()["targetLanguage"] == "German"

        response = generate(production_client, ["one", "two", "three"])
        assert response.json() == {"count": 3}
        assert generator.calls == [["one", "two"], ["three"]]

    def test_logout_clears_configured_cookie(self, production_client: TestClient):
        register(production_client)

        response = production_client.post("/auth/logout")
        assert response.headers["set-cookie"].startswith("cf_session=")
        assert production_client.get("/me").status_code == 401


def test_module_runs_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    runpy.run_module("card_flasher.main", run_name="__main__")

    assert calls == [(("card_flasher.main:app",), {"host": "127.0.0.1", "port": 8000})]
