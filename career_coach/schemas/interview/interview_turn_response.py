"""
Description:
Structured result of a next-turn request: feedback on the answer the candidate
just gave and the interviewer's next question.

Dependencies:
- pydantic: For data validation and serialization.
"""
from pydantic import BaseModel, Field

from career_coach.schemas.interview.interview_message import InterviewFeedback


class InterviewTurnResponse(BaseModel):
    feedback: InterviewFeedback = Field(..., description="Feedback on the candidate's most recent answer.")
    nextQuestion: str = Field(..., min_length=1, description="The next interview question to ask the candidate.")
