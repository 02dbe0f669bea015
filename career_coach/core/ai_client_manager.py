"""
AI Client Manager

Builds the LLM client from settings. The application lifespan calls
build_llm_client once and stores the result on `app.state`; nothing in this
module holds a client, so tests can construct the app with a fake instead.
"""
from typing import Optional

from loguru import logger
from openai import AsyncOpenAI

from career_coach.core.llm_client import LLMClient, OpenAILLMClient
from career_coach.core.settings import Settings
from career_coach.errors.exceptions import ConfigurationError


def build_openai_client(settings: Settings) -> AsyncOpenAI:
    """
    Create the AsyncOpenAI client described by `settings`.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    if not settings.llm_api_key:
        raise ConfigurationError(
            "LLM_API_KEY environment variable is not set. "
            "Please set it in your .env file or environment variables."
        )
    kwargs = {
        "api_key": settings.llm_api_key,
        "timeout": settings.llm_timeout_s,
        "max_retries": settings.llm_max_retries,
    }
    if settings.llm_base_url:
        kwargs["base_url"] = settings.llm_base_url
    return AsyncOpenAI(**kwargs)


def build_llm_client(settings: Settings, openai_client: Optional[AsyncOpenAI] = None) -> LLMClient:
    client = openai_client or build_openai_client(settings)
    logger.info(
        f"Initialized LLM client for model {settings.llm_model} "
        f"(response format: {settings.llm_response_format})"
    )
    return OpenAILLMClient(
        client,
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        response_format=settings.llm_response_format,
    )
