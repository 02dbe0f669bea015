"""
Resume Analysis API Route

Description:
Routes for the resume critique flow. The resume can be sent as JSON text or
uploaded as a plain text file; both go through ResumeAnalysisService.
Domain errors (validation, AI failures) are rendered by the central handlers.

Dependencies:
- fastapi: For defining routes, form fields and file uploads.
- career_coach.core.route_limiters: For per-IP rate limiting.
- loguru: For logging.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from loguru import logger

from career_coach.core.dependencies import get_resume_analysis_service
from career_coach.core.route_limiters import limiter, resume_analysis_limit
from career_coach.schemas.resume.resume_analysis import ResumeAnalysisRequest, ResumeAnalysisResult
from career_coach.services.resume_analysis.resume_analysis_service import ResumeAnalysisService

router = APIRouter(
    prefix="/api",
    tags=["resume-analysis"],
    responses={404: {"description": "Not found"}}
)


@router.post("/resume-analysis", response_model=ResumeAnalysisResult)
@limiter.limit(resume_analysis_limit)
async def analyze_resume(
    request: Request,
    payload: ResumeAnalysisRequest,
    service: ResumeAnalysisService = Depends(get_resume_analysis_service),
):
    """
    Critique a resume pasted as text for the given target role.
    """
    logger.info("Resume analysis requested")
    return await service.analyze(payload)


@router.post("/resume-analysis/upload", response_model=ResumeAnalysisResult)
@limiter.limit(resume_analysis_limit)
async def analyze_resume_upload(
    request: Request,
    file: UploadFile = File(...),
    jobTitle: str = Form(""),
    companyName: Optional[str] = Form(None),
    jobDescription: Optional[str] = Form(None),
    service: ResumeAnalysisService = Depends(get_resume_analysis_service),
):
    logger.info(f"Resume upload received: {file.filename}")
    content = await file.read()
    return await service.analyze_upload(
        file.filename,
        content,
        job_title=jobTitle,
        company_name=companyName,
        job_description=jobDescription,
    )
