from .interview_message import InterviewFeedback, InterviewMessage, MessageRole
from .interview_requests import AnswerRequest, InterviewSetupRequest
from .interview_summary import InterviewSummary
from .interview_turn_response import InterviewTurnResponse
from .interview_view import InterviewSessionView
from .session_state import InterviewPhase, InterviewSessionState

__all__ = [
    "InterviewFeedback",
    "InterviewMessage",
    "MessageRole",
    "AnswerRequest",
    "InterviewSetupRequest",
    "InterviewSummary",
    "InterviewTurnResponse",
    "InterviewSessionView",
    "InterviewPhase",
    "InterviewSessionState",
]
