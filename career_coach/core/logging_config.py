"""
Description:
Configures the loguru logger used across the service.

Dependencies:
- loguru: For logging.
"""
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single stderr sink at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, backtrace=False, diagnose=False)
    logger.info(f"Logging configured at level {level.upper()}")
