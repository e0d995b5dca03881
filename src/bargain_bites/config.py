"""
Runtime configuration for Bargain Bites.

Values come from the environment (optionally a .env file in the working
directory).
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Environment-backed settings, read once at import."""

    APP_NAME: str = os.getenv("APP_NAME", "Bargain Bites")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")
    PORT: int = int(os.getenv("PORT", "5000"))

    # Storage
    DB_DIR: str = os.getenv("DB_DIR", "data")
    FLYER_DIR: str = os.getenv("FLYER_DIR", os.path.join("data", "flyers"))

    # LLM
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "claude-sonnet-4-5-20250929")
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "4096"))
    USE_NULL_LLM: bool = os.getenv("USE_NULL_LLM", "").lower() == "true"


settings = Settings()
