"""
LLM Client

This module defines the interface the services use to talk to the language
model and its OpenAI-compatible implementation.

Two request modes are supported:
- generate_text: free-text completion.
- generate_structured: completion constrained to a pydantic model. The model's
  JSON schema goes out in `response_format` (or JSON mode only, for providers
  without schema support) and a field guide goes in the system message. The
  body is decoded by decode_structured_response.

Every failure leaves this module as LLMRequestError (MalformedResponseError
for unusable bodies), whatever the underlying cause.

Dependencies:
- openai: For the AsyncOpenAI chat completions client.
- pydantic: For the structured result models.
- loguru: For logging.
"""
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar

from loguru import logger
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel

from career_coach.errors.exceptions import LLMRequestError
from career_coach.helper.response_decoder import decode_structured_response
from career_coach.helper.schema_description import render_field_guide

ModelT = TypeVar("ModelT", bound=BaseModel)

TEXT_SYSTEM_PROMPT = "You are a helpful, professional career coach. Follow the user's instructions exactly."

STRUCTURED_SYSTEM_PROMPT = """You are a helpful, professional career coach.
Respond with a single JSON object and nothing else: no markdown, no code fences, no commentary.
The object must contain these fields:
<field_guide>
{field_guide}
</field_guide>"""


class LLMClient(ABC):
    """Interface of the language model used by the services."""

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Return the model's free-text completion of `prompt`."""

    @abstractmethod
    async def generate_structured(self, prompt: str, schema: Type[ModelT]) -> ModelT:
        """Return the model's completion of `prompt` decoded into `schema`."""

    async def aclose(self) -> None:
        """Release network resources. No-op by default."""


class OpenAILLMClient(LLMClient):
    """LLMClient backed by any OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        temperature: float = 0.4,
        max_tokens: int = 1500,
        response_format: str = "json_schema",
    ):
        self._client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.response_format = response_format

    def _response_format(self, schema: Type[BaseModel]) -> Dict[str, Any]:
        if self.response_format == "json_object":
            return {"type": "json_object"}
        return {
            "type": "json_schema",
            "json_schema": {
                "name": schema.__name__,
                "schema": schema.model_json_schema(),
                "strict": False,
            },
        }

    async def _complete(self, messages: List[Dict[str, str]], response_format: Optional[Dict[str, Any]] = None) -> str:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if response_format is not None:
            kwargs["response_format"] = response_format

        start_time = time.time()
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.error(f"LLM request failed after {time.time() - start_time:.2f}s: {type(e).__name__}: {e}")
            raise LLMRequestError(f"LLM request failed: {e}") from e
        logger.info(f"LLM call to {self.model} completed in {time.time() - start_time:.2f}s")

        if not response.choices:
            raise LLMRequestError("LLM returned no choices.")
        content = response.choices[0].message.content
        if content is None or not content.strip():
            raise LLMRequestError("LLM returned an empty message.")
        return content

    async def generate_text(self, prompt: str) -> str:
        logger.debug(f"Free-text prompt: {prompt}")
        content = await self._complete([
            {"role": "system", "content": TEXT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ])
        return content.strip()

    async def generate_structured(self, prompt: str, schema: Type[ModelT]) -> ModelT:
        logger.debug(f"Structured prompt for {schema.__name__}: {prompt}")
        system_prompt = STRUCTURED_SYSTEM_PROMPT.format(field_guide=render_field_guide(schema))
        content = await self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format=self._response_format(schema),
        )
        return decode_structured_response(content, schema)

    async def aclose(self) -> None:
        await self._client.close()
