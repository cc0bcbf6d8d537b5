import uuid as uuid_lib

from fastapi.testclient import TestClient
from sqlalchemy import select, update

from card_flasher.core.config import settings
from card_flasher.core.security import now_ms
from card_flasher.models.session import UserSession
from card_flasher.repositories.session_repo import SessionRepository

from helpers import PASSWORD, register


def unique_email(prefix: str) -> str:
    return f"{prefix}_{uuid_lib.uuid4().hex[:8]}@example.com"


class TestRegister:
    """POST /auth/register"""

    def test_register_success_sets_cookie(self, client: TestClient):
        """Registration answers ok and leaves a session cookie."""
        response = client.post(
            "/auth/register",
            json={"email": unique_email("newuser"), "password": PASSWORD},
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert settings.SESSION_COOKIE_NAME in response.cookies

    def test_register_existing_email(self, client: TestClient):
        """Same email in another case returns 409."""
        email = unique_email("duplicate")
        register(client, email)

        response = client.post(
            "/auth/register",
            json={"email": email.upper(), "password": "password456"},
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "User already exists."

    def test_register_invalid_email(self, client: TestClient):
        """Invalid email returns 400 with issues."""
        response = client.post(
            "/auth/register",
            json={"email": "invalid-email", "password": PASSWORD},
        )
        assert response.status_code == 400
        assert response.json()["issues"]

    def test_register_short_password(self, client: TestClient):
        """Password shorter than 6 characters returns 400."""
        response = client.post(
            "/auth/register",
            json={"email": unique_email("short"), "password": "12345"},
        )
        assert response.status_code == 400


class TestLogin:
    """POST /auth/login"""

    def test_login_success(self, client: TestClient):
        email = register(client, unique_email("login_test"))
        client.cookies.clear()

        response = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200
        assert client.get("/me").json()["email"] == email

    def test_login_email_is_case_insensitive(self, client: TestClient):
        email = register(client, unique_email("login_case"))
        client.cookies.clear()

        response = client.post("/auth/login", json={"email": email.upper(), "password": PASSWORD})
        assert response.status_code == 200
        assert client.get("/me").json()["email"] == email

    def test_login_wrong_password(self, client: TestClient):
        """Wrong password returns 401 without a cookie."""
        email = register(client, unique_email("wrong_pass"))
        client.cookies.clear()

        response = client.post("/auth/login", json={"email": email, "password": "wrongpassword"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials."
        assert settings.SESSION_COOKIE_NAME not in response.cookies

    def test_login_unknown_user(self, client: TestClient):
        response = client.post(
            "/auth/login",
            json={"email": unique_email("nobody"), "password": PASSWORD},
        )
        assert response.status_code == 401


class TestLogout:
    """POST /auth/logout"""

    def test_logout_invalidates_session(self, auth_client: TestClient):
        token = auth_client.cookies.get(settings.SESSION_COOKIE_NAME)
        assert token

        response = auth_client.post("/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        # the old token is gone on the server even if a client keeps sending it
        auth_client.cookies.set(settings.SESSION_COOKIE_NAME, token)
        assert auth_client.get("/me").status_code == 401

    def test_logout_without_session(self, client: TestClient):
        response = client.post("/auth/logout")
        assert response.status_code == 200


class TestMe:
    """GET/PATCH /me"""

    def test_me_requires_session(self, client: TestClient):
        response = client.get("/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    def test_me_unknown_token(self, client: TestClient):
        client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-real-token")
        assert client.get("/me").status_code == 401

    def test_me_returns_default_target_language(self, client: TestClient):
        email = register(client, unique_email("me_test"))

        data = client.get("/me").json()
        assert data["email"] == email
        assert data["targetLanguage"] == "Russian"
        assert isinstance(data["id"], int)

    def test_update_target_language(self, auth_client: TestClient):
        response = auth_client.patch("/me", json={"targetLanguage": "  German  "})
        assert response.status_code == 200
        assert response.json()["targetLanguage"] == "German"
        assert auth_client.get("/me").json()["targetLanguage"] == "German"

    def test_update_target_language_too_short(self, auth_client: TestClient):
        response = auth_client.patch("/me", json={"targetLanguage": " x "})
        assert response.status_code == 400


class TestSessionExpiry:
    def test_expired_session_is_rejected_and_deleted(self, auth_client: TestClient, db):
        token = auth_client.cookies.get(settings.SESSION_COOKIE_NAME)
        db.execute(update(UserSession).where(UserSession.token == token).values(expires_at=now_ms() - 1))
        db.commit()

        assert auth_client.get("/me").status_code == 401
        db.expire_all()
        assert db.execute(select(UserSession).where(UserSession.token == token)).first() is None

    def test_resolve_returns_none_at_exact_expiry(self, auth_client: TestClient, db):
        token = auth_client.cookies.get(settings.SESSION_COOKIE_NAME)
        repo = SessionRepository(db)
        session = repo.get(token)

        assert repo.resolve(token, now=session.expires_at - 1) is not None
        assert repo.resolve(token, now=session.expires_at) is None
        assert repo.get(token) is None

    def test_session_lifetime_is_thirty_days(self, auth_client: TestClient, db):
        token = auth_client.cookies.get(settings.SESSION_COOKIE_NAME)
        session = SessionRepository(db).get(token)

        days = (session.expires_at - now_ms()) / (24 * 60 * 60 * 1000)
        assert 29.9 < days <= 30
