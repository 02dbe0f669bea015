"""
Description:
This module sets up a rate limiter for the application using SlowAPI.
Clients are identified by their IP address. Only routes decorated with
`limiter.limit(...)` are limited. The application factory calls
`configure_rate_limits` with its settings, which switches the limiter on or
off and sets the resume analysis limit; that limit is passed to the decorators
as a callable so it is read per request.

Dependencies:
- slowapi: For rate limiting functionality.
- loguru: For logging information about the rate limiter initialization.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from loguru import logger

from career_coach.core.settings import Settings

limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])

HEALTH_LIMIT = "10/minute"

_limits = {"resume_analysis": Settings().resume_analysis_rate_limit}


def configure_rate_limits(settings: Settings) -> None:
    limiter.enabled = settings.rate_limit_enabled
    _limits["resume_analysis"] = settings.resume_analysis_rate_limit
    logger.info(
        f"Rate limiter {'enabled' if settings.rate_limit_enabled else 'disabled'}, "
        f"resume analysis limit {settings.resume_analysis_rate_limit}"
    )


def resume_analysis_limit() -> str:
    return _limits["resume_analysis"]
