"""
Description:
Schemas for one entry of the interview transcript and the per-answer feedback
attached to it.

Dependencies:
- pydantic: For data validation and serialization.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Author of a transcript entry."""
    USER = "user"
    MODEL = "model"


class InterviewFeedback(BaseModel):
    """Coaching notes on a single answer."""
    clarity: str = Field(..., description="How clear and well structured the answer was (1-2 sentences)")
    confidence: str = Field(..., description="How confident and assertive the answer sounded (1-2 sentences)")
    relevance: str = Field(..., description="How relevant the answer was to the question and the role (1-2 sentences)")


class InterviewMessage(BaseModel):
    role: MessageRole
    content: str
    feedback: Optional[InterviewFeedback] = Field(
        default=None, description="Feedback on this answer; only ever set on user messages"
    )
