"""
Interview Session State

This module defines the typed state of one mock interview and the mutations
the interview service is allowed to make on it. The methods keep the
transcript invariants in one place:

- the live transcript alternates model/user, starting with a model question;
- feedback is only ever attached to a user message;
- questionCount equals the number of model messages and never exceeds
  totalQuestions.

Dependencies:
- pydantic: For data validation and serialization
- typing: For type hints
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from career_coach.constants.interview_constants import TOTAL_QUESTIONS
from career_coach.errors.exceptions import InterviewStateError
from career_coach.schemas.interview.interview_message import InterviewFeedback, InterviewMessage, MessageRole
from career_coach.schemas.interview.interview_summary import InterviewSummary


class InterviewPhase(str, Enum):
    """Lifecycle phase of an interview session."""
    SETUP = "setup"
    LIVE = "live"
    SUMMARY = "summary"


class InterviewSessionState(BaseModel):
    """Complete state of one interview session."""
    sessionId: str = Field(..., description="Identifier of the session")
    phase: InterviewPhase = Field(default=InterviewPhase.SETUP, description="Current lifecycle phase")
    jobTitle: str = Field(default="", description="Target job title")
    companyName: Optional[str] = Field(default=None, description="Company name, if given")
    jobDescription: Optional[str] = Field(default=None, description="Job description, if given")
    messages: List[InterviewMessage] = Field(default_factory=list, description="Transcript in order")
    questionCount: int = Field(default=0, ge=0, description="Number of interviewer questions asked so far")
    totalQuestions: int = Field(default=TOTAL_QUESTIONS, description="Question budget for the session")
    summary: Optional[InterviewSummary] = Field(default=None, description="Final summary, set in the summary phase")
    error: Optional[str] = Field(default=None, description="User-facing message of the last failed action")
    isAwaitingResponse: bool = Field(default=False, description="Whether a model request is in flight")
    epoch: int = Field(default=0, description="Incremented on every reset; stale results compare against it")

    def budget_reached(self) -> bool:
        """Whether every budgeted question has been asked."""
        return self.questionCount >= self.totalQuestions

    def last_message(self) -> Optional[InterviewMessage]:
        return self.messages[-1] if self.messages else None

    def configure(self, job_title: str, company_name: Optional[str], job_description: Optional[str]) -> None:
        if self.phase != InterviewPhase.SETUP:
            raise InterviewStateError("The interview has already started.")
        self.jobTitle = job_title
        self.companyName = company_name
        self.jobDescription = job_description

    def append_question(self, content: str) -> None:
        """Append an interviewer question; the first one moves setup to live."""
        if self.phase == InterviewPhase.SUMMARY:
            raise InterviewStateError("The interview is already complete.")
        last = self.last_message()
        if last is not None and last.role == MessageRole.MODEL:
            raise InterviewStateError("Cannot ask two questions in a row.")
        if self.budget_reached():
            raise InterviewStateError("The question budget has been used up.")
        self.messages.append(InterviewMessage(role=MessageRole.MODEL, content=content))
        self.questionCount += 1
        self.phase = InterviewPhase.LIVE

    def append_answer(self, content: str) -> None:
        if self.phase != InterviewPhase.LIVE:
            raise InterviewStateError("Answers can only be submitted during a live interview.")
        last = self.last_message()
        if last is None or last.role != MessageRole.MODEL:
            raise InterviewStateError("There is no open question to answer.")
        self.messages.append(InterviewMessage(role=MessageRole.USER, content=content))

    def rollback_answer(self) -> None:
        """Remove the answer appended for a turn whose request failed."""
        last = self.last_message()
        if last is not None and last.role == MessageRole.USER and last.feedback is None:
            self.messages.pop()

    def attach_feedback(self, feedback: InterviewFeedback) -> None:
        last = self.last_message()
        if last is None or last.role != MessageRole.USER:
            raise InterviewStateError("Feedback can only be attached to an answer.")
        last.feedback = feedback

    def complete(self, summary: InterviewSummary) -> None:
        if self.phase != InterviewPhase.LIVE:
            raise InterviewStateError("Only a live interview can be completed.")
        self.summary = summary
        self.phase = InterviewPhase.SUMMARY

    def reset(self) -> None:
        """Clear everything and return to setup. In-flight results become stale."""
        self.phase = InterviewPhase.SETUP
        self.jobTitle = ""
        self.companyName = None
        self.jobDescription = None
        self.messages = []
        self.questionCount = 0
        self.summary = None
        self.error = None
        self.isAwaitingResponse = False
        self.epoch += 1
