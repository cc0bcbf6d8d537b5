from datetime import datetime, timezone

from fastapi import Request, Response

from card_flasher.core.config import Settings


def get_session_token(request: Request, settings: Settings) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def attach_session_cookie(response: Response, token: str, expires_at_ms: int, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        expires=datetime.fromtimestamp(expires_at_ms / 1000, tz=timezone.utc),
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
