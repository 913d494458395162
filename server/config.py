"""Pydantic settings loaded from .env and environment variables."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_MODEL = "openai/gpt-3.5-turbo"
INSECURE_SECRET_KEY = "change-me-in-production"


# ---------------------------------------------------------------------------
# Secret auto-generation
# ---------------------------------------------------------------------------


def _ensure_secrets(env_file: Path) -> None:
    """Generate SECRET_KEY if missing, append to .env."""
    import secrets as _secrets

    if os.environ.get("SECRET_KEY"):
        return

    key = _secrets.token_urlsafe(32)
    os.environ["SECRET_KEY"] = key
    env_file.parent.mkdir(parents=True, exist_ok=True)
    with open(env_file, "a") as f:
        f.write(f"\nSECRET_KEY={key}\n")


# ---------------------------------------------------------------------------
# Bootstrap: load .env, generate secrets
# ---------------------------------------------------------------------------

_env_file = BASE_DIR.parent / ".env"
load_dotenv(_env_file)
_ensure_secrets(_env_file)

# ---------------------------------------------------------------------------
# Settings (pydantic-settings): .env / env vars override defaults
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    SECRET_KEY: str = INSECURE_SECRET_KEY
    DEBUG: bool = False

    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'db.sqlite3'}"

    # Completion gateway (OpenRouter, OpenAI-compatible)
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    COMPLETION_TIMEOUT_SECONDS: float = 120.0

    # Browser client origin: CORS allow-list and HTTP-Referer for the gateway
    CLIENT_URL: str = "http://localhost:5173"
    APP_TITLE: str = "Chatbot Platform"

    DEFAULT_PROJECT_MODEL: str = DEFAULT_MODEL
    CHAT_MODEL: str = DEFAULT_MODEL
    CHAT_MAX_TOKENS: int = 1000
    CHAT_TEMPERATURE: float = 0.7

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""
    LOG_MAX_BYTES: int = 10_485_760
    LOG_BACKUP_COUNT: int = 5

    model_config = ConfigDict(
        env_file=str(BASE_DIR.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
