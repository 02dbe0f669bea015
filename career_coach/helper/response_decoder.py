"""
Description:
Turns a raw chat-completion body into a validated pydantic model.

The decode step runs in three stages: clean_ai_response strips reasoning tags,
code fences and any prose around the first JSON object; validate_ai_response
rejects bodies that look like leaked instructions; the remaining text is
validated against the caller's schema. Every failure raises
MalformedResponseError so callers only ever see one error type.

Dependencies:
- pydantic: For schema validation of the decoded JSON.
- loguru: For logging.
- career_coach.constants.regex_patterns: For the cleaning and leakage patterns.
"""
import re
from typing import Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from career_coach.constants.regex_patterns import LEAK_PATTERNS, REGEX_PATTERNS, SUSPICIOUS_PATTERNS
from career_coach.errors.exceptions import MalformedResponseError

MAX_RESPONSE_LENGTH = 8000

ModelT = TypeVar("ModelT", bound=BaseModel)


def _extract_first_json_object(content: str) -> Optional[str]:
    """Return the first balanced {...} block, ignoring braces inside JSON strings."""
    start = content.find('{')
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(content)):
        char = content[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return content[start:index + 1]
    return None


def clean_ai_response(content: str) -> str:
    """
    Clean AI response by removing thinking content and extracting only JSON.

    Some models wrap their answer in <think> blocks, markdown code fences or a
    sentence of preamble even when asked for JSON only. This keeps the first
    complete JSON object and drops everything else. Content without a complete
    object is returned stripped but otherwise unchanged.

    Example:
        >>> clean_ai_response('<think>reasoning...</think>{"score": 7}')
        '{"score": 7}'
        >>> clean_ai_response('Sure! ```json\\n{"score": 7}\\n```')
        '{"score": 7}'
    """
    if not content or not isinstance(content, str):
        return content

    original_length = len(content)

    content = REGEX_PATTERNS['think_block'].sub('', content)
    content = REGEX_PATTERNS['think_tag'].sub('', content)

    fenced = REGEX_PATTERNS['code_fence'].search(content)
    if fenced:
        content = fenced.group(1)

    content = content.strip()
    extracted = _extract_first_json_object(content)
    if extracted is not None:
        content = extracted

    if len(content) != original_length:
        logger.debug(f"AI response cleaned: {original_length} -> {len(content)} chars")

    return content


def validate_ai_response(content: str) -> bool:
    """
    Check a response for prompt leakage and unreasonable size.

    Returns False (and logs why) for empty content, content that echoes the
    prompt's own instructions, and content longer than MAX_RESPONSE_LENGTH.
    """
    if not content or not isinstance(content, str) or not content.strip():
        return False

    for pattern in LEAK_PATTERNS:
        if re.search(pattern, content, re.IGNORECASE | re.DOTALL):
            logger.warning(f"Potential system prompt leakage detected: {pattern}")
            return False

    if len(content) > MAX_RESPONSE_LENGTH:
        logger.warning("AI response exceeds reasonable length limit")
        return False

    for pattern in SUSPICIOUS_PATTERNS:
        if re.search(pattern, content, re.IGNORECASE | re.DOTALL):
            logger.warning(f"Suspicious content detected: {pattern}")
            return False

    return True


def decode_structured_response(content: Optional[str], schema: Type[ModelT]) -> ModelT:
    """
    Decode a raw model response into an instance of `schema`.

    Raises:
        MalformedResponseError: If the body is empty, fails the leakage check,
            is not JSON or does not match the schema.
    """
    if content is None or not content.strip():
        raise MalformedResponseError("The model returned an empty response.", content)

    cleaned = clean_ai_response(content)
    if not validate_ai_response(cleaned):
        raise MalformedResponseError("The model response failed validation.", content)

    try:
        return schema.model_validate_json(cleaned)
    except ValidationError as e:
        logger.warning(f"Response does not match {schema.__name__}: {e.error_count()} error(s)")
        raise MalformedResponseError(
            f"The model response does not match {schema.__name__}.", content
        ) from e
