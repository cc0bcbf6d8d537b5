import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.middleware.cors import CORSMiddleware

from card_flasher.api.routes import auth, cards, groups, me
from card_flasher.core.config import Settings, settings as default_settings
from card_flasher.core.errors import CardFlasherError, DatabaseNotConfiguredError
from card_flasher.db.session import Database
from card_flasher.services.content_generation import ContentGenerator, GeminiClient

logger = logging.getLogger(__name__)

DATABASE_GUARD_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Card Flasher</title></head>
<body>
  <main>
    <h1>Database is not configured</h1>
    <p>This deployment needs Neon/Postgres environment variables before the app can run.</p>
    <p>Set these variables in your deployment:</p>
    <ul>
      <li>DATABASE_URL or POSTGRES_URL</li>
      <li>GOOGLE_API_KEY</li>
    </ul>
  </main>
</body>
</html>
"""


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    content_generator: ContentGenerator | None = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    if database is None and settings.database_url:
        database = Database(settings.database_url)
    if database is None:
        logger.warning("DATABASE_URL/POSTGRES_URL is not set; database routes will answer 503")

    if content_generator is None:
        content_generator = ContentGenerator(GeminiClient(settings.GOOGLE_API_KEY, settings.GEMINI_MODEL))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.database is not None:
            app.state.database.ensure_schema()
        yield
        if app.state.database is not None:
            app.state.database.dispose()

    app = FastAPI(title="Card Flasher API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.content_generator = content_generator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------
    # Error handlers
    # -------------------------------
    @app.exception_handler(DatabaseNotConfiguredError)
    async def database_not_configured_handler(request: Request, exc: DatabaseNotConfiguredError):
        if wants_html(request):
            return HTMLResponse(DATABASE_GUARD_PAGE, status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(CardFlasherError)
    async def card_flasher_exception_handler(request: Request, exc: CardFlasherError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        content = {"detail": exc.message}
        if exc.issues:
            content["issues"] = jsonable_encoder(exc.issues)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request.", "issues": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error."},
        )

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(me.router, prefix="/me", tags=["me"])
    app.include_router(cards.router, prefix="/cards", tags=["cards"])
    app.include_router(groups.router, prefix="/groups", tags=["groups"])

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("card_flasher.main:app", host="127.0.0.1", port=8000)
