"""
Description:
Exception types for the career coach service.

The first group are HTTP exceptions raised directly by routes. The second group
are domain errors raised by services and the LLM client; they carry no HTTP
knowledge and are translated to responses by career_coach.errors.handlers.

Dependencies:
- fastapi: For HTTPException.
- starlette: For status codes.
"""
from typing import Optional

from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)


class BadRequest(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=HTTP_400_BAD_REQUEST, detail=detail)

class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=HTTP_404_NOT_FOUND, detail=detail)

class Conflict(HTTPException):
    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=HTTP_409_CONFLICT, detail=detail)

class BadGateway(HTTPException):
    def __init__(self, detail: str = "Upstream service failed"):
        super().__init__(status_code=HTTP_502_BAD_GATEWAY, detail=detail)

class ServiceUnavailable(HTTPException):
    def __init__(self, detail: str = "Service unavailable"):
        super().__init__(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=detail)

class InternalServerError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class CareerCoachError(Exception):
    """Base class for every domain error raised by the service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(CareerCoachError):
    """Raised at startup when required settings are missing or invalid."""


class InputValidationError(CareerCoachError):
    """A required field is missing or blank. Raised before any remote call."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SessionNotFoundError(CareerCoachError):
    def __init__(self, session_id: str):
        super().__init__(f"Interview session '{session_id}' not found.")
        self.session_id = session_id


class InterviewStateError(CareerCoachError):
    """The requested transition is not allowed in the session's current phase."""


class SessionBusyError(CareerCoachError):
    """A request for this session is already in flight."""


class LLMRequestError(CareerCoachError):
    """
    Any failure of a call to the LLM endpoint: network, timeout, auth, quota,
    provider error or an unusable response body. Callers do not distinguish
    subtypes.
    """


class MalformedResponseError(LLMRequestError):
    """The model answered, but the body is not JSON matching the declared schema."""

    def __init__(self, message: str, content: Optional[str] = None):
        super().__init__(message)
        self.content = content


class AIServiceError(CareerCoachError):
    """User-facing 'operation failed, please retry' error wrapping an LLMRequestError."""


class SpeechInputError(CareerCoachError):
    """Speech transcription failed or voice input is disabled."""
