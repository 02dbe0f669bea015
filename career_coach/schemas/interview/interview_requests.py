"""
Description:
Request bodies for the interview endpoints.

Validation of blank values happens in InterviewService so that the HTTP routes
and the WebSocket handler report the same message; these models only describe
the shape.

Dependencies:
- pydantic: For data validation.
"""
from typing import Optional

from pydantic import BaseModel, Field


class InterviewSetupRequest(BaseModel):
    jobTitle: str = Field(default="", description="Target job title, required")
    companyName: Optional[str] = Field(default=None, description="Company name (optional)")
    jobDescription: Optional[str] = Field(default=None, description="Job description (optional)")


class AnswerRequest(BaseModel):
    answer: str = Field(default="", description="The candidate's answer to the current question")
