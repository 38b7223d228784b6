"""
Configuration - Environment settings and logging setup.

Environment variables:
    FATEBOUND_ENV                 development | production
    ALLOWED_ORIGINS               Comma-separated CORS origins
    OPENAI_API_KEY                Enables generated commentary and tips
    FATEBOUND_COMMENTARY_MODEL    Chat model for commentary
    FATEBOUND_LOG_LEVEL           loguru level name
    FATEBOUND_SESSION_TTL         Seconds before an idle session is dropped
"""

import os
import sys

from loguru import logger

FATEBOUND_ENV = os.getenv("FATEBOUND_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
COMMENTARY_MODEL = os.getenv("FATEBOUND_COMMENTARY_MODEL", "gpt-4o-mini")
LOG_LEVEL = os.getenv("FATEBOUND_LOG_LEVEL", "INFO")
SESSION_TTL_SECONDS = float(os.getenv("FATEBOUND_SESSION_TTL", "3600"))


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with a single stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or LOG_LEVEL).upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan> - <level>{message}</level>",
    )
