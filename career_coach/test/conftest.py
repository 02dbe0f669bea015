"""
Shared fixtures: app factories wired to the scripted fakes in fakes.py, so no
test touches the network or a speech model.
"""
import pytest
from fastapi.testclient import TestClient

from career_coach.core.route_limiters import limiter
from career_coach.core.settings import Settings
from career_coach.main import create_app
from career_coach.test.fakes import FakeLLMClient, FakeSpeechInputProvider

limiter.enabled = False


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(llm_api_key="test-key", rate_limit_enabled=False)


@pytest.fixture
def client(test_settings, fake_llm):
    app = create_app(settings=test_settings, llm_client=fake_llm)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_speech() -> FakeSpeechInputProvider:
    return FakeSpeechInputProvider()


@pytest.fixture
def voice_client(test_settings, fake_llm, fake_speech):
    app = create_app(settings=test_settings, llm_client=fake_llm, speech_input_provider=fake_speech)
    with TestClient(app) as test_client:
        yield test_client
