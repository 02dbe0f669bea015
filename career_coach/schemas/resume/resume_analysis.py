"""
Description:
Schemas for the resume critique flow: the request submitted by the user and the
structured result returned by the model.

Dependencies:
- pydantic: For data validation and serialization.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class ResumeAnalysisRequest(BaseModel):
    """Blank required fields are rejected by ResumeAnalysisService, not here."""
    resumeText: str = Field(default="", description="Plain text of the resume")
    jobTitle: str = Field(default="", description="Target job title")
    companyName: Optional[str] = Field(default=None, description="Company name (optional)")
    jobDescription: Optional[str] = Field(default=None, description="Job description (optional)")


class ResumeAnalysisResult(BaseModel):
    score: int = Field(..., ge=0, le=100, description="A score from 0 to 100 for the resume.")
    strengths: List[str] = Field(..., description="Concise bullet points on what the resume does well.")
    weaknesses: List[str] = Field(..., description="Concise bullet points on areas for improvement.")
    atsKeywords: List[str] = Field(..., description="A list of suggested keywords to improve ATS compatibility.")
    actionableImprovements: List[str] = Field(
        ..., description="Specific, actionable steps the user can take to improve their resume."
    )
