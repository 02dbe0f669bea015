"""
Resume Analysis Service Module

Single request/response critique of a resume for a target role. Required
fields are checked before any request is made; any remote failure becomes one
retry-prompting error.

Dependencies:
- loguru: For logging.
- career_coach.core.llm_client: For the injected language model client.
- career_coach.core.secure_prompt_manager: For building the prompt.
"""
import os
from typing import Optional

from loguru import logger

from career_coach.constants.interview_constants import (
    ALLOWED_RESUME_FILE_EXTENSIONS,
    RESUME_ANALYSIS_FAILED_MESSAGE,
    RESUME_FIELDS_REQUIRED_MESSAGE,
    UNREADABLE_RESUME_FILE_MESSAGE,
    UNSUPPORTED_RESUME_FILE_MESSAGE,
)
from career_coach.core.llm_client import LLMClient
from career_coach.core.secure_prompt_manager import SecurePromptManager, clean_user_text, secure_prompt_manager
from career_coach.errors.exceptions import AIServiceError, InputValidationError, LLMRequestError
from career_coach.schemas.resume.resume_analysis import ResumeAnalysisRequest, ResumeAnalysisResult


class ResumeAnalysisService:
    def __init__(self, llm_client: LLMClient, prompt_manager: SecurePromptManager = secure_prompt_manager):
        self._llm = llm_client
        self._prompts = prompt_manager

    async def analyze(self, request: ResumeAnalysisRequest) -> ResumeAnalysisResult:
        """
        Raises:
            InputValidationError: Resume text or job title is blank.
            AIServiceError: The request failed or the response was unusable.
        """
        resume_text = clean_user_text(request.resumeText)
        job_title = clean_user_text(request.jobTitle)
        if not resume_text or not job_title:
            raise InputValidationError(RESUME_FIELDS_REQUIRED_MESSAGE)

        prompt = self._prompts.get_resume_analysis_prompt(
            resume_text=resume_text,
            job_title=job_title,
            company_name=clean_user_text(request.companyName),
            job_description=clean_user_text(request.jobDescription),
        )
        logger.info(f"Analyzing resume ({len(resume_text)} chars) for '{job_title}'")
        try:
            result = await self._llm.generate_structured(prompt, ResumeAnalysisResult)
        except LLMRequestError as e:
            logger.error(f"Error analyzing resume: {e.message}")
            raise AIServiceError(RESUME_ANALYSIS_FAILED_MESSAGE) from e

        logger.info(f"Resume analysis complete with score {result.score}")
        return result

    async def analyze_upload(
        self,
        filename: Optional[str],
        content: bytes,
        job_title: str,
        company_name: Optional[str] = None,
        job_description: Optional[str] = None,
    ) -> ResumeAnalysisResult:
        """Analyze a resume uploaded as a UTF-8 text file."""
        extension = os.path.splitext(filename or "")[1].lower()
        if extension not in ALLOWED_RESUME_FILE_EXTENSIONS:
            raise InputValidationError(UNSUPPORTED_RESUME_FILE_MESSAGE, field="file")
        try:
            resume_text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning(f"Could not decode uploaded resume '{filename}': {e}")
            raise InputValidationError(UNREADABLE_RESUME_FILE_MESSAGE, field="file") from e

        return await self.analyze(
            ResumeAnalysisRequest(
                resumeText=resume_text,
                jobTitle=job_title,
                companyName=company_name,
                jobDescription=job_description,
            )
        )
