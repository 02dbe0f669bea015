from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from loguru import logger

from career_coach.errors.exceptions import (
    AIServiceError,
    BadGateway,
    BadRequest,
    CareerCoachError,
    Conflict,
    InputValidationError,
    InternalServerError,
    InterviewStateError,
    NotFound,
    ServiceUnavailable,
    SessionBusyError,
    SessionNotFoundError,
    SpeechInputError,
)

# Domain error -> HTTP exception used to render it
DOMAIN_ERROR_RESPONSES = {
    InputValidationError: BadRequest,
    SessionNotFoundError: NotFound,
    InterviewStateError: Conflict,
    SessionBusyError: Conflict,
    AIServiceError: BadGateway,
    SpeechInputError: ServiceUnavailable,
}


def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )

def domain_exception_handler(request: Request, exc: CareerCoachError):
    """
    Render a domain error raised by a service as the matching HTTP error.

    Errors without an entry in DOMAIN_ERROR_RESPONSES (for example a
    ConfigurationError surfacing mid-request) are treated as unexpected.
    """
    for error_type, http_error in DOMAIN_ERROR_RESPONSES.items():
        if isinstance(exc, error_type):
            logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
            return http_exception_handler(request, http_error(exc.message))
    return generic_exception_handler(request, exc)

def generic_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}")
    return http_exception_handler(request, InternalServerError("An unexpected error occurred."))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(CareerCoachError, domain_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
