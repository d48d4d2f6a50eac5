"""
Runtime configuration for the resume API.

Values come from the environment (a local .env file is loaded first) and are
frozen into a ``Settings`` object at startup. The Gemini key is mandatory:
the process refuses to start without it.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from resume_api.errors import ConfigError

load_dotenv()

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 60.0
DEFAULT_WEB_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str
    gemini_model: str = DEFAULT_MODEL
    gemini_api_base: str = DEFAULT_API_BASE
    request_timeout: float = DEFAULT_TIMEOUT
    web_origins: List[str] = field(default_factory=lambda: list(DEFAULT_WEB_ORIGINS))
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


def load_settings() -> Settings:
    api_key = os.getenv("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise ConfigError("Gemini API key is required. Set the GEMINI_API_KEY environment variable.")

    origins = os.getenv("WEB_ORIGINS")
    try:
        timeout = float(os.getenv("GEMINI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT))
        port = int(os.getenv("PORT", "3000"))
    except ValueError as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e

    return Settings(
        gemini_api_key=api_key,
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        gemini_api_base=os.getenv("GEMINI_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        request_timeout=timeout,
        web_origins=_split_origins(origins) if origins else list(DEFAULT_WEB_ORIGINS),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
