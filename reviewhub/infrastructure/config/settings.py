"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclasses for safety and clarity
- Single source of truth for all configurable values

REQUIRED vs OPTIONAL:
- MONGODB_URL is required; the app refuses to start without it
- GOOGLE_API_KEY is optional at startup; only summarisation requests fail
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()

DEV_SESSION_SECRET = "dev-only-change-me"


@dataclass(frozen=True)
class DatabaseSettings:
    """MongoDB connection settings."""

    url: str = field(default_factory=lambda: os.getenv("MONGODB_URL", ""))
    name: str = field(default_factory=lambda: os.getenv("MONGODB_DB", "reviewhub"))
    server_selection_timeout_ms: int = 5000


@dataclass(frozen=True)
class LLMSettings:
    """Google Gemini settings for likes/dislikes summarisation."""

    api_key: str = field(default_factory=lambda: os.getenv("GOOGLE_API_KEY", ""))
    api_url: str = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))

    # Low temperature keeps the JSON shape stable
    temperature: float = 0.1
    timeout_seconds: int = 60

    # Prompt size bounds
    max_reviews: int = 50
    max_comment_chars: int = 300


@dataclass(frozen=True)
class SessionSettings:
    """Signed session cookie settings."""

    secret_key: str = field(default_factory=lambda: os.getenv("SESSION_SECRET", DEV_SESSION_SECRET))
    cookie_name: str = "reviewhub_session"
    max_age_seconds: int = 14 * 24 * 60 * 60
    https_only: bool = field(default_factory=lambda: os.getenv("SESSION_HTTPS_ONLY", "") == "1")


@dataclass(frozen=True)
class ServerSettings:
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from reviewhub.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.database.url)
    """

    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    session: SessionSettings = field(default_factory=SessionSettings)
    server: ServerSettings = field(default_factory=ServerSettings)

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.database.url:
            issues.append(
                "ERROR: MONGODB_URL not set. "
                "The API cannot start without a database."
            )

        if not self.llm.api_key:
            issues.append(
                "WARNING: GOOGLE_API_KEY not set. "
                "Likes/dislikes generation requests will fail."
            )

        if self.session.secret_key == DEV_SESSION_SECRET and self.session.https_only:
            issues.append(
                "ERROR: SESSION_SECRET not set while SESSION_HTTPS_ONLY=1. "
                "Refusing to sign production sessions with a development key."
            )
        elif self.session.secret_key == DEV_SESSION_SECRET:
            issues.append(
                "WARNING: SESSION_SECRET not set. "
                "Session cookies are signed with a development key."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
