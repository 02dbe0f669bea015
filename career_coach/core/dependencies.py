"""
Description:
FastAPI dependencies that hand the components built in the application
lifespan to the routes. Everything lives on `app.state`, so a test can build
the app with fakes through create_app.

Dependencies:
- fastapi: For Request and dependency injection.
"""
from typing import Optional

from fastapi import Request
from starlette.requests import HTTPConnection

from career_coach.core.settings import Settings
from career_coach.services.interview.interview_service import InterviewService
from career_coach.services.interview.session_registry import SessionRegistry
from career_coach.services.resume_analysis.resume_analysis_service import ResumeAnalysisService
from career_coach.services.speech_input.speech_input_provider import SpeechInputProvider


# HTTPConnection covers both Request and WebSocket
def get_settings(connection: HTTPConnection) -> Settings:
    return connection.app.state.settings


def get_interview_service(connection: HTTPConnection) -> InterviewService:
    return connection.app.state.interview_service


def get_session_registry(connection: HTTPConnection) -> SessionRegistry:
    return connection.app.state.session_registry


def get_resume_analysis_service(request: Request) -> ResumeAnalysisService:
    return request.app.state.resume_analysis_service


def get_speech_input_provider(connection: HTTPConnection) -> Optional[SpeechInputProvider]:
    return connection.app.state.speech_input_provider
