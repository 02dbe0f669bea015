"""
Description:
Final performance summary produced once the question budget is used up.

Dependencies:
- pydantic: For data validation and serialization.
"""
from typing import List

from pydantic import BaseModel, Field


class InterviewSummary(BaseModel):
    overallScore: int = Field(..., ge=0, le=100, description="An overall performance score from 0 to 100.")
    strengths: List[str] = Field(..., description="Key strengths demonstrated during the interview.")
    areasForImprovement: List[str] = Field(..., description="Specific areas for improvement.")
