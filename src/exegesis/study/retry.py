"""
Retry/Backoff Controller

Bounded re-attempt policy around a single generation attempt:
Idle -> Attempting(n) -> Success | Retrying -> Attempting(n+1) | Failed.
The policy holds no state between runs; each run() starts at Idle.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

from exegesis.utils.errors import ConfigurationError, StudyGenerationFailed
from exegesis.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_STATUS_ATTRIBUTES = ("status_code", "code", "status")


def is_retryable_status(status_code: Optional[int]) -> bool:
    """No status or a server-side status (>= 500) is retryable."""
    return status_code is None or status_code >= 500


def extract_status_code(error: BaseException) -> Optional[int]:
    """
    Find an integer HTTP-like status on the error or along its cause chain.

    Provider exceptions disagree on the attribute name: google-api-core and
    google-genai use `code`, HTTP clients use `status_code` or `status`.
    """
    seen = set()
    current: Optional[BaseException] = error

    while current is not None and id(current) not in seen:
        seen.add(id(current))
        for attr in _STATUS_ATTRIBUTES:
            value = getattr(current, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        current = current.__cause__ or current.__context__

    return None


def is_retryable(error: BaseException) -> bool:
    if isinstance(error, ConfigurationError):
        return False
    return is_retryable_status(extract_status_code(error))


def exponential_backoff(base_delay: float) -> Callable[[int], float]:
    """Delay after failed attempt n: base * 2^(n-1)."""

    def delay_for(attempt: int) -> float:
        return base_delay * (2 ** (attempt - 1))

    return delay_for


@dataclass
class RetryPolicy:
    """
    Bounded retry with exponential backoff.

    Args:
        max_attempts: Upper bound on attempts per run
        base_delay: Seconds to wait after the first failure; doubles each time
        classifier: Decides whether an error deserves another attempt
        sleep: Awaitable sleep, injectable for tests
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    classifier: Callable[[BaseException], bool] = is_retryable
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._delay_for = exponential_backoff(self.base_delay)

    def delay_for(self, attempt: int) -> float:
        return self._delay_for(attempt)

    async def run(
        self,
        attempt_fn: Callable[[], Awaitable[T]],
        run_id: Optional[str] = None,
    ) -> T:
        """
        Call `attempt_fn` until it succeeds, a terminal error occurs, or attempts run out.

        Raises:
            ConfigurationError: propagated unchanged, its message is the remediation.
            StudyGenerationFailed: chained from the last error, message kept generic.
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            start = time.time()
            logger.info(
                f"Generation attempt {attempt}/{self.max_attempts}",
                extra={
                    "event": "generation_attempt",
                    "run_id": run_id,
                    "attempt": attempt,
                    "max_attempts": self.max_attempts,
                },
            )
            try:
                return await attempt_fn()
            except Exception as e:
                last_error = e
                status_code = extract_status_code(e)
                retryable = self.classifier(e)
                logger.warning(
                    f"Generation attempt {attempt} failed: {e}",
                    extra={
                        "event": "attempt_failed",
                        "run_id": run_id,
                        "attempt": attempt,
                        "status_code": status_code,
                        "retryable": retryable,
                        "duration_ms": int((time.time() - start) * 1000),
                    },
                )

                if not retryable:
                    logger.error(
                        "Terminal generation error, not retrying",
                        extra={
                            "event": "terminal_error",
                            "run_id": run_id,
                            "attempt": attempt,
                            "status_code": status_code,
                        },
                    )
                    if isinstance(e, ConfigurationError):
                        raise
                    raise StudyGenerationFailed() from e

                if attempt < self.max_attempts:
                    delay = self.delay_for(attempt)
                    logger.info(
                        f"Retrying in {delay}s",
                        extra={
                            "event": "retry_scheduled",
                            "run_id": run_id,
                            "attempt": attempt + 1,
                            "delay_s": delay,
                        },
                    )
                    await self.sleep(delay)

        logger.error(
            f"All {self.max_attempts} generation attempts failed",
            extra={
                "event": "retry_exhausted",
                "run_id": run_id,
                "max_attempts": self.max_attempts,
            },
        )
        raise StudyGenerationFailed() from last_error
