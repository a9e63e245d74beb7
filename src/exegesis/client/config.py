"""
Generation Configuration

Explicit configuration object handed to the generation client.
The environment is read only by GenerationConfig.from_env(); .env files are
loaded by the application entry point.
"""

import os
from dataclasses import dataclass
from typing import Optional

from exegesis.utils.errors import ConfigurationError
from exegesis.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass(frozen=True)
class GenerationConfig:
    """Settings for talking to the generative service."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_seconds: float = DEFAULT_BASE_DELAY_SECONDS
    request_timeout_seconds: Optional[float] = None

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """
        Build a config from process environment variables.

        GOOGLE_API_KEY is the credential; GEMINI_MODEL, STUDY_MAX_ATTEMPTS,
        STUDY_BASE_DELAY_SECONDS and STUDY_REQUEST_TIMEOUT_SECONDS are optional overrides.
        """
        api_key = (os.getenv("GOOGLE_API_KEY") or "").strip() or None
        max_attempts = os.getenv("STUDY_MAX_ATTEMPTS")
        base_delay = _env_float("STUDY_BASE_DELAY_SECONDS")

        return cls(
            api_key=api_key,
            model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            max_attempts=int(max_attempts) if max_attempts else DEFAULT_MAX_ATTEMPTS,
            base_delay_seconds=(
                base_delay if base_delay is not None else DEFAULT_BASE_DELAY_SECONDS
            ),
            request_timeout_seconds=_env_float("STUDY_REQUEST_TIMEOUT_SECONDS"),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def require_api_key(self) -> str:
        """Return the credential or raise ConfigurationError."""
        if not self.has_api_key:
            logger.error(
                "GOOGLE_API_KEY not configured",
                extra={"event": "config_missing"},
            )
            raise ConfigurationError()
        return self.api_key.strip()
