from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables or a `.env` file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    """Runtime mode (`dev`, `test`, `prod`)."""

    DATABASE_URL: str = "sqlite:///./notes.db"
    """SQLAlchemy connection string for the note store."""

    SECRET_KEY: str = "dev-secret-change-me"
    """Key used to sign session tokens."""

    ALGORITHM: str = "HS256"
    """JWT signing algorithm."""

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    """Session token lifetime, 7 days by default."""

    BCRYPT_ROUNDS: int = 12
    """bcrypt cost factor for password hashes."""

    FRONTEND_ORIGIN: str = "http://localhost:3000"
    """Allowed CORS origin(s), comma separated."""

    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 8000
    """Bind address for `python -m scribz_api` / `scribz-api`."""

    SEED_DEMO_USER: bool = False
    """Create a demo account at startup when running in dev mode."""

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.FRONTEND_ORIGIN.split(",") if o.strip()]


# PUBLIC_INTERFACE
@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
