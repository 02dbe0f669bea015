from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

from career_coach.core.ai_client_manager import build_llm_client
from career_coach.core.cors_middleware import add_cors_middleware
from career_coach.core.llm_client import LLMClient
from career_coach.core.logging_config import configure_logging
# Rate Limiter
from career_coach.core.route_limiters import configure_rate_limits, limiter
from career_coach.core.settings import Settings, load_settings
from career_coach.errors.handlers import register_exception_handlers
# Routers
from career_coach.routes.health import router as health_router
from career_coach.routes.interview import router as interview_router
from career_coach.routes.interview_ws import router as interview_ws_router
from career_coach.routes.resume_analysis import router as resume_analysis_router
from career_coach.services.interview.interview_service import InterviewService
from career_coach.services.interview.session_registry import SessionRegistry
from career_coach.services.resume_analysis.resume_analysis_service import ResumeAnalysisService
from career_coach.services.speech_input.speech_input_provider import (
    SpeechInputProvider,
    build_speech_input_provider,
)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[LLMClient] = None,
    speech_input_provider: Optional[SpeechInputProvider] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The LLM client and speech input provider are created in the lifespan from
    settings unless they are passed in, which is how tests supply fakes.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan events."""
        # Startup
        owns_client = llm_client is None
        try:
            client = llm_client or build_llm_client(settings)
            speech_input = speech_input_provider or build_speech_input_provider(settings)
        except Exception as e:
            logger.error(f"Error during application startup: {e}")
            raise

        app.state.settings = settings
        app.state.llm_client = client
        app.state.speech_input_provider = speech_input
        app.state.session_registry = SessionRegistry(
            ttl_s=settings.session_ttl_s,
            max_sessions=settings.max_sessions,
        )
        app.state.interview_service = InterviewService(client)
        app.state.resume_analysis_service = ResumeAnalysisService(client)
        logger.info("Application startup completed successfully")

        yield

        # Shutdown
        if owns_client:
            await client.aclose()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Career Coach AI Service",
        description="Resume critique and mock interview coaching backed by an LLM",
        version="0.1.0",
        lifespan=lifespan
    )
    add_cors_middleware(app, settings.cors_allowed_origins)

    # Centralized error handlers
    register_exception_handlers(app)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    configure_rate_limits(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(health_router)
    app.include_router(resume_analysis_router)
    app.include_router(interview_router)
    app.include_router(interview_ws_router)
    return app


app = create_app()
