"""
Health check endpoint for the application.

Description:
This module defines a FastAPI route for checking the health status of the application.

Arguments:
- request: An instance of Request, required for rate limiting.

Returns:
- A JSON response with the status of the application, the configured model and
  whether voice input is available.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- career_coach.core.route_limiters: For rate limiting functionality.
- career_coach.schemas.health_response: For defining the response model.
- loguru: For logging information about the health check endpoint.
"""
from fastapi import APIRouter, Depends, Request
from loguru import logger

from career_coach.core.dependencies import get_settings
from career_coach.core.route_limiters import HEALTH_LIMIT, limiter
from career_coach.core.settings import Settings
from career_coach.schemas.health_response import HealthResponse

router = APIRouter(
    prefix="/api",
    tags=["health"],
    responses={404: {"description": "Not found"}}
)


@router.get("/health", response_model=HealthResponse)
@limiter.limit(HEALTH_LIMIT)
async def health(request: Request, settings: Settings = Depends(get_settings)):
    """
    Request parameter is required for rate limiting.
    """
    logger.info("Health check endpoint called")
    return HealthResponse(
        status="ok",
        model=settings.llm_model,
        speechInputEnabled=request.app.state.speech_input_provider is not None,
    )
