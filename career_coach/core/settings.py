"""
Description:
Environment-driven settings for the service. Values are read once, after
loading a local .env file, into an immutable Settings object that the
application factory passes to the components it builds.

Dependencies:
- python-dotenv: For loading the .env file.
"""
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

RESPONSE_FORMAT_MODES = ("json_schema", "json_object")

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = _get_env(name)
    if raw is None:
        return default
    values = tuple(item.strip() for item in raw.split(",") if item.strip())
    return values or default


@dataclass(frozen=True)
class Settings:
    llm_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.4
    llm_max_tokens: int = 1500
    llm_timeout_s: float = 60.0
    llm_max_retries: int = 0
    llm_response_format: str = "json_schema"
    log_level: str = "INFO"
    cors_allowed_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    rate_limit_enabled: bool = True
    resume_analysis_rate_limit: str = "10/minute"
    session_ttl_s: float = 3600.0
    max_sessions: int = 1000
    speech_input_enabled: bool = False
    whisper_model_size: str = "base.en"


def load_settings() -> Settings:
    """Build Settings from the process environment (and .env, if present)."""
    load_dotenv()

    response_format = (_get_env("LLM_RESPONSE_FORMAT", "json_schema") or "json_schema").lower()
    if response_format not in RESPONSE_FORMAT_MODES:
        response_format = "json_schema"

    return Settings(
        llm_api_key=_get_env("LLM_API_KEY") or _get_env("OPENAI_API_KEY"),
        llm_base_url=_get_env("LLM_BASE_URL"),
        llm_model=_get_env("LLM_MODEL", "gpt-4o-mini"),
        llm_temperature=_get_env_float("LLM_TEMPERATURE", 0.4),
        llm_max_tokens=_get_env_int("LLM_MAX_TOKENS", 1500),
        llm_timeout_s=_get_env_float("LLM_TIMEOUT_S", 60.0),
        llm_max_retries=_get_env_int("LLM_MAX_RETRIES", 0),
        llm_response_format=response_format,
        log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        cors_allowed_origins=_get_env_list("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS),
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        resume_analysis_rate_limit=_get_env("RESUME_ANALYSIS_RATE_LIMIT", "10/minute"),
        session_ttl_s=_get_env_float("SESSION_TTL_S", 3600.0),
        max_sessions=_get_env_int("MAX_SESSIONS", 1000),
        speech_input_enabled=_get_env_bool("SPEECH_INPUT_ENABLED", False),
        whisper_model_size=_get_env("WHISPER_MODEL_SIZE", "base.en"),
    )
