"""
Interview API Routes

Description:
REST routes for the mock interview. Each session is created empty in setup,
started with the job details, advanced one answer at a time and finally reset
or deleted. Every route returns the session view the browser renders.

Dependencies:
- fastapi: For defining routes and dependency injection.
- loguru: For logging.
"""
from fastapi import APIRouter, Depends, Response
from loguru import logger
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from career_coach.core.dependencies import get_interview_service, get_session_registry
from career_coach.schemas.interview import AnswerRequest, InterviewSessionView, InterviewSetupRequest
from career_coach.services.interview.interview_service import InterviewService
from career_coach.services.interview.session_registry import SessionRegistry

router = APIRouter(
    prefix="/api/interviews",
    tags=["interview"],
    responses={404: {"description": "Not found"}}
)


@router.post("", response_model=InterviewSessionView, status_code=HTTP_201_CREATED)
async def create_interview(registry: SessionRegistry = Depends(get_session_registry)):
    state = registry.create()
    return InterviewSessionView.from_state(state)


@router.get("/{session_id}", response_model=InterviewSessionView)
async def get_interview(session_id: str, registry: SessionRegistry = Depends(get_session_registry)):
    return InterviewSessionView.from_state(registry.get(session_id))


@router.post("/{session_id}/start", response_model=InterviewSessionView)
async def start_interview(
    session_id: str,
    payload: InterviewSetupRequest,
    registry: SessionRegistry = Depends(get_session_registry),
    service: InterviewService = Depends(get_interview_service),
):
    """
    Ask for the first question. On failure the session stays in setup and the
    error is returned; GET the session to see the recorded message.
    """
    state = registry.get(session_id)
    await service.start_interview(state, payload.jobTitle, payload.companyName, payload.jobDescription)
    return InterviewSessionView.from_state(state)


@router.post("/{session_id}/answers", response_model=InterviewSessionView)
async def submit_answer(
    session_id: str,
    payload: AnswerRequest,
    registry: SessionRegistry = Depends(get_session_registry),
    service: InterviewService = Depends(get_interview_service),
):
    state = registry.get(session_id)
    await service.submit_answer(state, payload.answer)
    return InterviewSessionView.from_state(state)


@router.post("/{session_id}/reset", response_model=InterviewSessionView)
async def reset_interview(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
    service: InterviewService = Depends(get_interview_service),
):
    state = registry.get(session_id)
    service.reset(state)
    return InterviewSessionView.from_state(state)


@router.delete("/{session_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_interview(session_id: str, registry: SessionRegistry = Depends(get_session_registry)):
    registry.delete(session_id)
    logger.info(f"Interview session {session_id} discarded by client")
    return Response(status_code=HTTP_204_NO_CONTENT)
