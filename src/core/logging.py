"""
Loguru setup shared by the API and the service layer.

Services log with keyword context (``logger.info("...", remark=remark)``);
the sink renders those keywords from ``record["extra"]``.
"""

import sys
from loguru import logger
from .config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level> {extra}"
)


def setup_logging(level: str | None = None):
    """Replace loguru's default handler with a single stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        serialize=settings.app_env == "prod",
        backtrace=False,
        diagnose=settings.app_env == "dev",
    )
    return logger
