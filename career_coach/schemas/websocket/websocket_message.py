"""
Description:
This module defines the schemas for WebSocket messages used by the interview
chat endpoint.

# WebSocketClientMessage is the schema for messages sent by the browser.
# WebSocketServerMessage is the schema for every message sent back; all of them
# carry the current session view so the client can re-render from it.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.
"""

from typing import Literal, Optional

from pydantic import BaseModel

from career_coach.schemas.interview.interview_view import InterviewSessionView


class WebSocketClientMessage(BaseModel):
    type: Literal["setup", "answer", "reset", "audio_chunk", "audio_end"]
    content: Optional[str] = None
    jobTitle: Optional[str] = None
    companyName: Optional[str] = None
    jobDescription: Optional[str] = None


class WebSocketServerMessage(BaseModel):
    type: Literal["question", "summary", "transcript", "incremental_transcript", "reset", "error"]
    content: str = ""
    session: Optional[InterviewSessionView] = None
