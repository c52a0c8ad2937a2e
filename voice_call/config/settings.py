"""
Environment-backed runtime settings.

Values are read once from environment variables (a ``.env`` file is loaded
when present) and exposed through typed properties. Call timings are grouped
in a pydantic model so a session can be built with different delays, which
the tests use to run the state machine without real waiting.
"""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from voice_call.config import constants

env_path = Path(".") / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return float(value)


class CallTimings(BaseModel):
    """Delays (in seconds) used by the turn coordinator and the recorder."""

    settle_delay: float = Field(constants.SETTLE_DELAY, ge=0)
    recognition_end_delay: float = Field(constants.RECOGNITION_END_DELAY, ge=0)
    no_speech_delay: float = Field(constants.NO_SPEECH_DELAY, ge=0)
    start_retry_delay: float = Field(constants.START_RETRY_DELAY, ge=0)
    recognition_error_delay: float = Field(constants.RECOGNITION_ERROR_DELAY, ge=0)
    exchange_retry_delay: float = Field(constants.EXCHANGE_RETRY_DELAY, ge=0)
    recording_ack_timeout: float = Field(constants.RECORDING_ACK_TIMEOUT, gt=0)

    @classmethod
    def from_env(cls) -> "CallTimings":
        return cls(
            settle_delay=_float_env("SETTLE_DELAY", constants.SETTLE_DELAY),
            recognition_end_delay=_float_env(
                "RECOGNITION_END_DELAY", constants.RECOGNITION_END_DELAY
            ),
            no_speech_delay=_float_env("NO_SPEECH_DELAY", constants.NO_SPEECH_DELAY),
            start_retry_delay=_float_env(
                "START_RETRY_DELAY", constants.START_RETRY_DELAY
            ),
            recognition_error_delay=_float_env(
                "RECOGNITION_ERROR_DELAY", constants.RECOGNITION_ERROR_DELAY
            ),
            exchange_retry_delay=_float_env(
                "EXCHANGE_RETRY_DELAY", constants.EXCHANGE_RETRY_DELAY
            ),
            recording_ack_timeout=_float_env(
                "RECORDING_ACK_TIMEOUT", constants.RECORDING_ACK_TIMEOUT
            ),
        )


class Settings:
    """
    Central configuration for the voice call service.
    """

    def __init__(self) -> None:
        self._backend_api_base = os.getenv(
            "BACKEND_API_BASE", constants.DEFAULT_BACKEND_API_BASE
        ).rstrip("/")
        self._host = os.getenv("HOST", "0.0.0.0")
        self._port = int(os.getenv("PORT", "8000"))
        self._log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self._timings = CallTimings.from_env()

    @property
    def backend_api_base(self) -> str:
        return self._backend_api_base

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def log_level(self) -> str:
        return self._log_level

    @property
    def timings(self) -> CallTimings:
        return self._timings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
