"""
Logging setup - loguru sink configured from settings.

Usage:
    from loguru import logger
    logger.info("Mock test {} submitted", test_id)
"""

import sys
from loguru import logger

from app.core.config import get_settings


def setup_logging() -> None:
    """Replace loguru's default sink with one honouring LOG_LEVEL."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if settings.debug else settings.log_level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        backtrace=settings.debug,
        diagnose=settings.debug,
    )
