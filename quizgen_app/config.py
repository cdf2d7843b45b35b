"""Environment-driven configuration for the server and the generator."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from quizgen_app.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TEMPERATURE,
    DEFAULT_PORT,
    DEFAULT_PUBLIC_URL,
    GENERATION_RATE_LIMIT,
    LLM_REQUEST_TIMEOUT_SECONDS,
)

log = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"


@dataclass(slots=True, frozen=True)
class AppConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    public_url: str = DEFAULT_PUBLIC_URL
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    llm_model: str = DEFAULT_LLM_MODEL
    llm_api_key: str = ""
    llm_temperature: float = DEFAULT_LLM_TEMPERATURE
    llm_timeout_seconds: float = LLM_REQUEST_TIMEOUT_SECONDS
    generation_rate_limit: str = GENERATION_RATE_LIMIT


def load_config(env_path: Path = ENV_PATH) -> AppConfig:
    """Read settings from the environment, after loading an optional .env file."""
    load_dotenv(dotenv_path=env_path)
    config = AppConfig(
        host=os.getenv("QUIZGEN_HOST", DEFAULT_HOST),
        port=int(os.getenv("QUIZGEN_PORT", str(DEFAULT_PORT))),
        public_url=os.getenv("QUIZGEN_PUBLIC_URL", DEFAULT_PUBLIC_URL),
        llm_base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_LLM_BASE_URL),
        llm_model=os.getenv("OPENAI_MODEL", DEFAULT_LLM_MODEL),
        llm_api_key=os.getenv("OPENAI_API_KEY", ""),
        llm_temperature=float(os.getenv("OPENAI_TEMPERATURE", str(DEFAULT_LLM_TEMPERATURE))),
        llm_timeout_seconds=float(
            os.getenv("OPENAI_TIMEOUT_SECONDS", str(LLM_REQUEST_TIMEOUT_SECONDS))
        ),
        generation_rate_limit=os.getenv("QUIZGEN_RATE_LIMIT", GENERATION_RATE_LIMIT),
    )
    log.debug("ENV_PATH=%s exists=%s", env_path, env_path.exists())
    log.debug("LLM base=%s model=%s key_set=%s", config.llm_base_url, config.llm_model, bool(config.llm_api_key))
    return config
