"""
Description:
Presentation model of a session, returned by the HTTP routes and carried by
every WebSocket message. Model-authored text has its markdown bold markers
removed, and the question progress ("Question N of 5") is precomputed.

Dependencies:
- pydantic: For serialization.
- career_coach.helper.markdown_cleaner: For stripping markdown from model text.
"""
from typing import List, Optional

from pydantic import BaseModel

from career_coach.helper.markdown_cleaner import clean_markdown
from career_coach.schemas.interview.interview_message import InterviewMessage, MessageRole
from career_coach.schemas.interview.interview_summary import InterviewSummary
from career_coach.schemas.interview.session_state import InterviewPhase, InterviewSessionState


class InterviewSessionView(BaseModel):
    sessionId: str
    phase: InterviewPhase
    jobTitle: str
    companyName: Optional[str] = None
    jobDescription: Optional[str] = None
    messages: List[InterviewMessage]
    questionNumber: int
    totalQuestions: int
    summary: Optional[InterviewSummary] = None
    error: Optional[str] = None
    isAwaitingResponse: bool

    @classmethod
    def from_state(cls, state: InterviewSessionState) -> "InterviewSessionView":
        messages = [
            message.model_copy(update={"content": clean_markdown(message.content)})
            if message.role == MessageRole.MODEL else message
            for message in state.messages
        ]
        return cls(
            sessionId=state.sessionId,
            phase=state.phase,
            jobTitle=state.jobTitle,
            companyName=state.companyName,
            jobDescription=state.jobDescription,
            messages=messages,
            questionNumber=min(state.questionCount, state.totalQuestions),
            totalQuestions=state.totalQuestions,
            summary=state.summary,
            error=state.error,
            isAwaitingResponse=state.isAwaitingResponse,
        )
