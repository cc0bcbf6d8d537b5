from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Neon/Vercel style deployments expose POSTGRES_URL instead
    DATABASE_URL: str | None = None
    POSTGRES_URL: str | None = None

    GOOGLE_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GENERATION_BATCH_SIZE: int = 50

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000"

    SESSION_COOKIE_NAME: str = "card_flasher_session"
    SESSION_DAYS: int = 30
    PASSWORD_HASH_ROUNDS: int = 12

    DEFAULT_TARGET_LANGUAGE: str = "Russian"

    @property
    def database_url(self) -> str | None:
        url = self.DATABASE_URL or self.POSTGRES_URL
        if not url:
            return None
        # SQLAlchemy only understands postgresql://
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+psycopg2://", 1)
        return url

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
