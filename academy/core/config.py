# File: academy/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
from pydantic import ValidationError, field_validator
import sys


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str
    SECRET_KEY: str
    ENVIRONMENT: str = "development"

    # --- Generative AI ---
    # No key at all is a supported "offline" mode: the functions answer with canned payloads.
    AI_PROVIDER: str = "gemini"  # "gemini" | "openai"
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.0-flash-exp"
    GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    AI_REQUEST_TIMEOUT_SECONDS: float = 60.0

    # Every origin is allowed unless configured otherwise.
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # --- Auth configuration ---
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Performance instrumentation
    SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS: int = 300
    DATABASE_CONNECTION_MAX_RETRIES: int = 3
    DATABASE_CONNECTION_RETRY_BACKOFF_SECONDS: float = 1.0

    # --- Gamification ---
    LESSON_COMPLETION_POINTS: int = 5
    COURSE_COMPLETION_POINTS: int = 50

    @property
    def ai_enabled(self) -> bool:
        if self.AI_PROVIDER == "openai":
            return bool(self.OPENAI_API_KEY)
        return bool(self.GEMINI_API_KEY)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        """Rewrite the legacy ``postgres://`` scheme.

        Managed Postgres providers (Supabase included) still hand out URLs
        using ``postgres://``. SQLAlchemy dropped that alias and raises
        ``NoSuchModuleError`` on import, so we upgrade it to ``postgresql://``
        and leave explicit drivers and SQLite URLs untouched.
        """

        if not isinstance(value, str):
            return value

        if value.startswith("postgres://"):
            return "postgresql://" + value[len("postgres://") :]

        return value


def _log_settings_validation_error(exc: ValidationError) -> None:
    """Pretty-print missing or invalid environment variables.

    The exception bubbles up during module import, which makes it hard to see
    which variable is responsible. We print the structured payload to stderr
    before re-raising so it shows up in the server logs.
    """

    header = "Configuration error while loading environment variables:"
    print(header, file=sys.stderr)

    details = exc.errors()
    if details:
        for error in details:
            location = ".".join(str(part) for part in error.get("loc", ()))
            message = error.get("msg", "Unknown validation error")
            type_name = error.get("type")
            hint_parts = [message]
            if type_name:
                hint_parts.append(f"(type={type_name})")
            print(f"  - {location}: {' '.join(hint_parts)}", file=sys.stderr)
    else:
        print(exc, file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
