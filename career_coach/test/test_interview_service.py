"""
Test Interview Service Module

Covers the interview state machine: question budget, feedback placement,
failure rollback, the busy guard and reset while a request is in flight.
"""
import asyncio

import pytest

from career_coach.constants.interview_constants import (
    ANSWER_TOO_LONG_MESSAGE,
    INTERVIEW_START_FAILED_MESSAGE,
    INTERVIEW_SUMMARY_FAILED_MESSAGE,
    INTERVIEW_TURN_FAILED_MESSAGE,
    JOB_TITLE_REQUIRED_MESSAGE,
    MAX_ANSWER_LENGTH,
    TOTAL_QUESTIONS,
)
from career_coach.core.llm_client import LLMClient
from career_coach.errors.exceptions import (
    AIServiceError,
    InputValidationError,
    InterviewStateError,
    SessionBusyError,
)
from career_coach.schemas.interview import (
    InterviewPhase,
    InterviewSessionState,
    InterviewSummary,
    InterviewTurnResponse,
    MessageRole,
)
from career_coach.services.interview.interview_service import InterviewService

from career_coach.test.fakes import FIRST_QUESTION, FakeLLMClient, make_summary, make_turn, remote_failure


def new_state() -> InterviewSessionState:
    return InterviewSessionState(sessionId="session-1")


async def start_live(fake_llm: FakeLLMClient, job_title: str = "Senior Product Manager"):
    service = InterviewService(fake_llm)
    state = new_state()
    fake_llm.queue(FIRST_QUESTION)
    await service.start_interview(state, job_title)
    return service, state


class TestStartInterview:
    @pytest.mark.asyncio
    async def test_first_question_moves_setup_to_live(self, fake_llm):
        service, state = await start_live(fake_llm)

        assert state.phase == InterviewPhase.LIVE
        assert state.questionCount == 1
        assert len(state.messages) == 1
        assert state.messages[0].role == MessageRole.MODEL
        assert state.messages[0].content == FIRST_QUESTION
        assert fake_llm.calls[0]["mode"] == "text"

    @pytest.mark.asyncio
    async def test_first_question_carries_no_feedback(self, fake_llm):
        _, state = await start_live(fake_llm)
        assert state.messages[0].feedback is None

    @pytest.mark.asyncio
    async def test_optional_fields_reach_the_prompt(self, fake_llm):
        service = InterviewService(fake_llm)
        state = new_state()
        fake_llm.queue(FIRST_QUESTION)

        await service.start_interview(state, "Data Analyst", "Acme Corp", "SQL and dashboards")

        prompt = fake_llm.calls[0]["prompt"]
        assert "Data Analyst" in prompt
        assert "Acme Corp" in prompt
        assert "SQL and dashboards" in prompt
        assert state.companyName == "Acme Corp"

    @pytest.mark.asyncio
    async def test_blank_job_title_makes_no_request(self, fake_llm):
        service = InterviewService(fake_llm)
        state = new_state()

        with pytest.raises(InputValidationError) as exc_info:
            await service.start_interview(state, "   ")

        assert exc_info.value.message == JOB_TITLE_REQUIRED_MESSAGE
        assert fake_llm.calls == []
        assert state.phase == InterviewPhase.SETUP

    @pytest.mark.asyncio
    async def test_control_character_job_title_is_blank(self, fake_llm):
        service = InterviewService(fake_llm)
        state = new_state()

        with pytest.raises(InputValidationError) as exc_info:
            await service.start_interview(state, "\x07 \x00", company_name="Acme")

        assert exc_info.value.message == JOB_TITLE_REQUIRED_MESSAGE
        assert fake_llm.calls == []
        assert state.jobTitle == ""
        assert state.companyName is None

    @pytest.mark.asyncio
    async def test_control_characters_are_stripped_from_job_fields(self, fake_llm):
        service = InterviewService(fake_llm)
        state = new_state()
        fake_llm.queue(FIRST_QUESTION)

        await service.start_interview(state, "Data\x07 Analyst", company_name="\x1b")

        assert state.jobTitle == "Data Analyst"
        assert state.companyName is None

    @pytest.mark.asyncio
    async def test_failure_keeps_setup(self, fake_llm):
        service = InterviewService(fake_llm)
        state = new_state()
        fake_llm.queue(remote_failure())

        with pytest.raises(AIServiceError) as exc_info:
            await service.start_interview(state, "Senior Product Manager")

        assert exc_info.value.message == INTERVIEW_START_FAILED_MESSAGE
        assert state.phase == InterviewPhase.SETUP
        assert state.messages == []
        assert state.questionCount == 0
        assert state.error == INTERVIEW_START_FAILED_MESSAGE
        assert state.isAwaitingResponse is False

    @pytest.mark.asyncio
    async def test_retry_after_failure_succeeds(self, fake_llm):
        service = InterviewService(fake_llm)
        state = new_state()
        fake_llm.queue(remote_failure(), FIRST_QUESTION)

        with pytest.raises(AIServiceError):
            await service.start_interview(state, "Senior Product Manager")
        await service.start_interview(state, "Senior Product Manager")

        assert state.phase == InterviewPhase.LIVE
        assert state.error is None

    @pytest.mark.asyncio
    async def test_cannot_start_twice(self, fake_llm):
        service, state = await start_live(fake_llm)
        with pytest.raises(InterviewStateError):
            await service.start_interview(state, "Senior Product Manager")


class TestSubmitAnswer:
    @pytest.mark.asyncio
    async def test_feedback_is_attached_to_the_answer(self, fake_llm):
        service, state = await start_live(fake_llm)
        fake_llm.queue(make_turn("How do you prioritize a roadmap?"))

        await service.submit_answer(state, "I launched a billing product.")

        roles = [message.role for message in state.messages]
        assert roles == [MessageRole.MODEL, MessageRole.USER, MessageRole.MODEL]
        assert state.messages[1].feedback is not None
        assert state.messages[1].feedback.clarity.startswith("Clear structure")
        assert state.messages[2].feedback is None
        assert state.questionCount == 2
        assert fake_llm.calls[-1]["schema"] is InterviewTurnResponse

    @pytest.mark.asyncio
    async def test_next_turn_prompt_carries_transcript_and_question_number(self, fake_llm):
        service, state = await start_live(fake_llm)
        fake_llm.queue(make_turn("Second question?"))

        await service.submit_answer(state, "My first answer.")

        prompt = fake_llm.calls[-1]["prompt"]
        assert f"Interviewer: {FIRST_QUESTION}" in prompt
        assert "Candidate: My first answer." in prompt
        assert f"question 2 of {TOTAL_QUESTIONS}" in prompt

    @pytest.mark.asyncio
    async def test_blank_answer_makes_no_request(self, fake_llm):
        service, state = await start_live(fake_llm)
        calls_before = len(fake_llm.calls)

        with pytest.raises(InputValidationError):
            await service.submit_answer(state, "  \n ")

        assert len(fake_llm.calls) == calls_before
        assert len(state.messages) == 1

    @pytest.mark.asyncio
    async def test_control_character_answer_is_blank(self, fake_llm):
        service, state = await start_live(fake_llm)
        calls_before = len(fake_llm.calls)

        with pytest.raises(InputValidationError):
            await service.submit_answer(state, "\x00\x07 \x1b")

        assert len(fake_llm.calls) == calls_before
        assert len(state.messages) == 1
        assert state.isAwaitingResponse is False

    @pytest.mark.asyncio
    async def test_answer_over_limit_makes_no_request(self, fake_llm):
        service, state = await start_live(fake_llm)
        calls_before = len(fake_llm.calls)

        with pytest.raises(InputValidationError) as exc_info:
            await service.submit_answer(state, "x" * (MAX_ANSWER_LENGTH + 1))

        assert exc_info.value.message == ANSWER_TOO_LONG_MESSAGE
        assert len(fake_llm.calls) == calls_before
        assert len(state.messages) == 1

    @pytest.mark.asyncio
    async def test_latest_answer_reaches_prompt_after_long_answers(self, fake_llm):
        service, state = await start_live(fake_llm)
        long_answer = "y" * MAX_ANSWER_LENGTH
        for number in range(2, TOTAL_QUESTIONS):
            fake_llm.queue(make_turn(f"Question {number}?"))
            await service.submit_answer(state, long_answer)

        fake_llm.queue(make_turn(f"Question {TOTAL_QUESTIONS}?"))
        await service.submit_answer(state, "My most recent answer.")
        turn_prompt = fake_llm.calls[-1]["prompt"]
        assert "Candidate: My most recent answer.\n</transcript>" in turn_prompt
        assert f"Interviewer: {FIRST_QUESTION}" in turn_prompt

        fake_llm.queue(make_summary())
        await service.submit_answer(state, long_answer)
        summary_prompt = fake_llm.calls[-1]["prompt"]
        assert f"Interviewer: {FIRST_QUESTION}" in summary_prompt
        assert "Candidate: My most recent answer." in summary_prompt
        assert summary_prompt.count("Candidate: " + long_answer) == TOTAL_QUESTIONS - 1
        assert state.phase == InterviewPhase.SUMMARY

    @pytest.mark.asyncio
    async def test_answer_before_start_is_rejected(self, fake_llm):
        service = InterviewService(fake_llm)
        with pytest.raises(InterviewStateError):
            await service.submit_answer(new_state(), "Hello")
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_malformed_turn_response_rolls_back(self, fake_llm):
        service, state = await start_live(fake_llm)
        fake_llm.queue('{"nextQuestion": "Missing feedback"}')

        with pytest.raises(AIServiceError):
            await service.submit_answer(state, "An answer.")

        assert len(state.messages) == 1
        assert state.questionCount == 1


class TestFullInterview:
    @pytest.mark.asyncio
    async def test_senior_product_manager_five_answers(self, fake_llm):
        service, state = await start_live(fake_llm, "Senior Product Manager")
        assert state.phase == InterviewPhase.LIVE

        for number in range(2, TOTAL_QUESTIONS + 1):
            fake_llm.queue(make_turn(f"Question {number}?", label=f"answer {number - 1}"))
            await service.submit_answer(state, f"Answer {number - 1}")
            assert state.phase == InterviewPhase.LIVE
            assert state.questionCount == number

        fake_llm.queue(make_summary(score=78))
        await service.submit_answer(state, f"Answer {TOTAL_QUESTIONS}")

        assert state.phase == InterviewPhase.SUMMARY
        assert isinstance(state.summary, InterviewSummary)
        assert 0 <= state.summary.overallScore <= 100
        assert state.summary.overallScore == 78
        assert fake_llm.calls[-1]["schema"] is InterviewSummary

    @pytest.mark.asyncio
    async def test_question_budget_is_never_exceeded(self, fake_llm):
        service, state = await start_live(fake_llm)
        for number in range(2, TOTAL_QUESTIONS + 1):
            fake_llm.queue(make_turn(f"Question {number}?"))
            await service.submit_answer(state, "An answer")
        fake_llm.queue(make_summary())
        await service.submit_answer(state, "Last answer")

        model_messages = [m for m in state.messages if m.role == MessageRole.MODEL]
        assert len(model_messages) == TOTAL_QUESTIONS
        assert state.questionCount == TOTAL_QUESTIONS

    @pytest.mark.asyncio
    async def test_every_answer_but_the_last_has_one_feedback(self, fake_llm):
        service, state = await start_live(fake_llm)
        for number in range(2, TOTAL_QUESTIONS + 1):
            fake_llm.queue(make_turn(f"Question {number}?"))
            await service.submit_answer(state, "An answer")
        fake_llm.queue(make_summary())
        await service.submit_answer(state, "Last answer")

        user_messages = [m for m in state.messages if m.role == MessageRole.USER]
        assert len(user_messages) == TOTAL_QUESTIONS
        assert all(m.feedback is not None for m in user_messages[:-1])
        assert all(m.feedback is None for m in state.messages if m.role == MessageRole.MODEL)

    @pytest.mark.asyncio
    async def test_summary_prompt_contains_full_transcript(self, fake_llm):
        service, state = await start_live(fake_llm)
        for number in range(2, TOTAL_QUESTIONS + 1):
            fake_llm.queue(make_turn(f"Question {number}?"))
            await service.submit_answer(state, f"Answer {number - 1}")
        fake_llm.queue(make_summary())
        await service.submit_answer(state, "Final answer")

        prompt = fake_llm.calls[-1]["prompt"]
        assert "Senior Product Manager" in prompt
        assert "Candidate: Answer 1" in prompt
        assert "Candidate: Final answer" in prompt

    @pytest.mark.asyncio
    async def test_no_answers_after_summary(self, fake_llm):
        service, state = await start_live(fake_llm)
        for number in range(2, TOTAL_QUESTIONS + 1):
            fake_llm.queue(make_turn(f"Question {number}?"))
            await service.submit_answer(state, "An answer")
        fake_llm.queue(make_summary())
        await service.submit_answer(state, "Last answer")

        with pytest.raises(InterviewStateError):
            await service.submit_answer(state, "One more")


class TestFailureRollback:
    @pytest.mark.asyncio
    async def test_turn_three_failure_rolls_back_the_answer(self, fake_llm):
        service, state = await start_live(fake_llm)
        fake_llm.queue(make_turn("Question 2?"), make_turn("Question 3?"))
        await service.submit_answer(state, "Answer 1")
        await service.submit_answer(state, "Answer 2")
        messages_before = [m.model_copy(deep=True) for m in state.messages]

        fake_llm.queue(remote_failure())
        with pytest.raises(AIServiceError) as exc_info:
            await service.submit_answer(state, "Answer 3")

        assert exc_info.value.message == INTERVIEW_TURN_FAILED_MESSAGE
        assert state.phase == InterviewPhase.LIVE
        assert state.questionCount == 3
        assert state.messages == messages_before
        assert state.error == INTERVIEW_TURN_FAILED_MESSAGE
        assert state.isAwaitingResponse is False

        fake_llm.queue(make_turn("Question 4?"))
        await service.submit_answer(state, "Answer 3")
        assert state.questionCount == 4
        assert state.error is None
        assert [m.content for m in state.messages].count("Answer 3") == 1

    @pytest.mark.asyncio
    async def test_summary_failure_rolls_back_and_stays_live(self, fake_llm):
        service, state = await start_live(fake_llm)
        for number in range(2, TOTAL_QUESTIONS + 1):
            fake_llm.queue(make_turn(f"Question {number}?"))
            await service.submit_answer(state, "An answer")

        fake_llm.queue(remote_failure())
        with pytest.raises(AIServiceError) as exc_info:
            await service.submit_answer(state, "Last answer")

        assert exc_info.value.message == INTERVIEW_SUMMARY_FAILED_MESSAGE
        assert state.phase == InterviewPhase.LIVE
        assert state.messages[-1].role == MessageRole.MODEL
        assert state.summary is None


class SlowLLMClient(LLMClient):
    """Blocks every request until `release` is set."""

    def __init__(self, text: str, structured: dict):
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.text = text
        self.structured = structured

    async def generate_text(self, prompt):
        self.started.set()
        await self.release.wait()
        return self.text

    async def generate_structured(self, prompt, schema):
        self.started.set()
        await self.release.wait()
        return schema.model_validate(self.structured)


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_second_request_while_busy_is_rejected(self):
        slow = SlowLLMClient(FIRST_QUESTION, make_turn("Question 2?"))
        service = InterviewService(slow)
        state = new_state()

        first = asyncio.create_task(service.start_interview(state, "Senior Product Manager"))
        await slow.started.wait()
        with pytest.raises(SessionBusyError):
            await service.start_interview(state, "Senior Product Manager")

        slow.release.set()
        await first
        assert state.phase == InterviewPhase.LIVE
        assert state.questionCount == 1

    @pytest.mark.asyncio
    async def test_reset_discards_late_result(self):
        slow = SlowLLMClient(FIRST_QUESTION, make_turn("Question 2?"))
        service = InterviewService(slow)
        state = new_state()

        pending = asyncio.create_task(service.start_interview(state, "Senior Product Manager"))
        await slow.started.wait()
        service.reset(state)
        slow.release.set()
        await pending

        assert state.phase == InterviewPhase.SETUP
        assert state.messages == []
        assert state.questionCount == 0
        assert state.epoch == 1
        assert state.isAwaitingResponse is False


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_from_summary_returns_to_setup(self, fake_llm):
        service, state = await start_live(fake_llm)
        for number in range(2, TOTAL_QUESTIONS + 1):
            fake_llm.queue(make_turn(f"Question {number}?"))
            await service.submit_answer(state, "An answer")
        fake_llm.queue(make_summary())
        await service.submit_answer(state, "Last answer")

        service.reset(state)

        assert state.phase == InterviewPhase.SETUP
        assert state.messages == []
        assert state.summary is None
        assert state.jobTitle == ""
        assert state.questionCount == 0
