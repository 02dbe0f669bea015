"""
Interview Service Module

This module drives the mock interview state machine (setup -> live -> summary)
against the language model.

- start_interview asks for the first question as free text. The first question
  never carries feedback because there is no answer yet.
- submit_answer appends the answer, then either asks for feedback plus the next
  question or, once the question budget is used up, for the final summary.
- A failed request rolls back the just-submitted answer so the user can retry
  without a duplicate turn; phase and question count stay as they were.
- At most one request is in flight per session. A reset while a request is
  outstanding bumps the session epoch and the late result is discarded.

Dependencies:
- loguru: For logging.
- career_coach.core.llm_client: For the injected language model client.
- career_coach.core.secure_prompt_manager: For building prompts.
"""
from typing import Optional

from loguru import logger

from career_coach.constants.interview_constants import (
    ANSWER_REQUIRED_MESSAGE,
    ANSWER_TOO_LONG_MESSAGE,
    INTERVIEW_START_FAILED_MESSAGE,
    INTERVIEW_SUMMARY_FAILED_MESSAGE,
    INTERVIEW_TURN_FAILED_MESSAGE,
    JOB_TITLE_REQUIRED_MESSAGE,
    MAX_ANSWER_LENGTH,
    SESSION_BUSY_MESSAGE,
)
from career_coach.core.llm_client import LLMClient
from career_coach.core.secure_prompt_manager import SecurePromptManager, clean_user_text, secure_prompt_manager
from career_coach.errors.exceptions import (
    AIServiceError,
    InputValidationError,
    InterviewStateError,
    LLMRequestError,
    SessionBusyError,
)
from career_coach.schemas.interview.interview_summary import InterviewSummary
from career_coach.schemas.interview.interview_turn_response import InterviewTurnResponse
from career_coach.schemas.interview.session_state import InterviewPhase, InterviewSessionState


def _optional(value: Optional[str]) -> Optional[str]:
    return clean_user_text(value) or None


class InterviewService:
    def __init__(self, llm_client: LLMClient, prompt_manager: SecurePromptManager = secure_prompt_manager):
        self._llm = llm_client
        self._prompts = prompt_manager

    @staticmethod
    def _ensure_idle(state: InterviewSessionState) -> None:
        if state.isAwaitingResponse:
            raise SessionBusyError(SESSION_BUSY_MESSAGE)

    async def start_interview(
        self,
        state: InterviewSessionState,
        job_title: str,
        company_name: Optional[str] = None,
        job_description: Optional[str] = None,
    ) -> InterviewSessionState:
        """
        Ask for the first question and move the session from setup to live.

        Raises:
            SessionBusyError: A request is already in flight.
            InterviewStateError: The session is not in setup.
            InputValidationError: The job title is blank. No request is made.
            AIServiceError: The request failed; the session stays in setup.
        """
        self._ensure_idle(state)
        if state.phase != InterviewPhase.SETUP:
            raise InterviewStateError("The interview has already started. Reset it to begin a new one.")
        job_title = clean_user_text(job_title)
        if not job_title:
            state.error = JOB_TITLE_REQUIRED_MESSAGE
            raise InputValidationError(JOB_TITLE_REQUIRED_MESSAGE, field="jobTitle")

        state.configure(job_title, _optional(company_name), _optional(job_description))
        prompt = self._prompts.get_first_question_prompt(state.jobTitle, state.companyName, state.jobDescription)

        state.error = None
        state.isAwaitingResponse = True
        epoch = state.epoch
        logger.info(f"Session {state.sessionId}: starting interview for '{state.jobTitle}'")
        try:
            question = await self._llm.generate_text(prompt)
        except LLMRequestError as e:
            if state.epoch != epoch:
                logger.info(f"Session {state.sessionId}: discarding failed start after reset")
                return state
            state.isAwaitingResponse = False
            state.error = INTERVIEW_START_FAILED_MESSAGE
            logger.error(f"Session {state.sessionId}: failed to get first question: {e.message}")
            raise AIServiceError(INTERVIEW_START_FAILED_MESSAGE) from e
        except Exception:
            if state.epoch == epoch:
                state.isAwaitingResponse = False
            raise

        if state.epoch != epoch:
            logger.info(f"Session {state.sessionId}: discarding first question received after reset")
            return state

        state.isAwaitingResponse = False
        state.append_question(question)
        logger.info(f"Session {state.sessionId}: setup -> live")
        return state

    async def submit_answer(self, state: InterviewSessionState, answer: str) -> InterviewSessionState:
        """
        Record an answer and advance the interview by one turn.

        Before the budget is reached the model returns feedback on the answer
        (attached to the answer) and the next question. Once every budgeted
        question has been answered the model returns the final summary and the
        session moves to summary.

        Raises:
            SessionBusyError: A request is already in flight.
            InterviewStateError: The session is not live.
            InputValidationError: The answer is blank or too long. No request is made.
            AIServiceError: The request failed; the answer was rolled back.
        """
        self._ensure_idle(state)
        if state.phase == InterviewPhase.SUMMARY:
            raise InterviewStateError("The interview is complete. Reset it to start a new one.")
        if state.phase != InterviewPhase.LIVE:
            raise InterviewStateError("The interview has not started yet.")
        answer = clean_user_text(answer)
        if not answer:
            raise InputValidationError(ANSWER_REQUIRED_MESSAGE, field="answer")
        if len(answer) > MAX_ANSWER_LENGTH:
            raise InputValidationError(ANSWER_TOO_LONG_MESSAGE, field="answer")

        state.append_answer(answer)
        state.error = None
        state.isAwaitingResponse = True
        epoch = state.epoch

        wants_summary = state.budget_reached()
        failure_message = INTERVIEW_SUMMARY_FAILED_MESSAGE if wants_summary else INTERVIEW_TURN_FAILED_MESSAGE
        try:
            if wants_summary:
                prompt = self._prompts.get_interview_summary_prompt(state.messages, state.jobTitle)
                result = await self._llm.generate_structured(prompt, InterviewSummary)
            else:
                prompt = self._prompts.get_next_turn_prompt(
                    state.messages,
                    question_number=state.questionCount + 1,
                    job_title=state.jobTitle,
                    company_name=state.companyName,
                    job_description=state.jobDescription,
                    total_questions=state.totalQuestions,
                )
                result = await self._llm.generate_structured(prompt, InterviewTurnResponse)
        except LLMRequestError as e:
            if state.epoch != epoch:
                logger.info(f"Session {state.sessionId}: discarding failed turn after reset")
                return state
            state.rollback_answer()
            state.isAwaitingResponse = False
            state.error = failure_message
            logger.error(
                f"Session {state.sessionId}: turn failed at question {state.questionCount}, "
                f"answer rolled back: {e.message}"
            )
            raise AIServiceError(failure_message) from e
        except Exception:
            if state.epoch == epoch:
                state.rollback_answer()
                state.isAwaitingResponse = False
            raise

        if state.epoch != epoch:
            logger.info(f"Session {state.sessionId}: discarding model response received after reset")
            return state

        state.isAwaitingResponse = False
        if wants_summary:
            state.complete(result)
            logger.info(f"Session {state.sessionId}: live -> summary (score {result.overallScore})")
        else:
            state.attach_feedback(result.feedback)
            state.append_question(result.nextQuestion)
            logger.info(f"Session {state.sessionId}: question {state.questionCount} of {state.totalQuestions}")
        return state

    def reset(self, state: InterviewSessionState) -> InterviewSessionState:
        """Return the session to setup from any phase, discarding in-flight results."""
        state.reset()
        logger.info(f"Session {state.sessionId}: reset to setup (epoch {state.epoch})")
        return state
