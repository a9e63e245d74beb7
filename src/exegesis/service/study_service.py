"""
Study Service Layer

Orchestrates one study generation:
- Credential check (terminal, before any network attempt)
- Prompt and schema selection by mode/depth
- Generation under the bounded retry policy
- run_id correlation for every log line of the run
"""

import asyncio
import time
import uuid
from typing import Awaitable, Callable, Optional, Union

from exegesis.client.config import GenerationConfig
from exegesis.client.generation_client import GenerationClient
from exegesis.study.model import BookStudy, PassageStudy
from exegesis.study.request import StudyRequest
from exegesis.study.retry import RetryPolicy
from exegesis.utils.errors import ConfigurationError, StudyGenerationFailed
from exegesis.utils.logger import get_logger
from exegesis.utils.prompts import build_prompt

logger = get_logger(__name__)


async def generate_study(
    request: StudyRequest,
    config: GenerationConfig,
    client: Optional[GenerationClient] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Union[PassageStudy, BookStudy]:
    """
    Generate a study for the request.

    Flow:
    1. Fail fast with ConfigurationError when no API key is configured
    2. Build prompt + schema for the request's mode
    3. Run the generation client under RetryPolicy
    4. Return the normalized, mode-tagged result

    Raises:
        ConfigurationError: credential missing; message tells how to configure it
        StudyGenerationFailed: generic failure after a terminal error or exhausted attempts
    """
    run_id = str(uuid.uuid4())
    start_time = time.time()
    mode = request.mode.value

    logger.info(
        f"Study requested for {request.subject!r}",
        extra={
            "event": "study_start",
            "run_id": run_id,
            "mode": mode,
            "depth": str(getattr(request.depth, "value", request.depth)),
        },
    )

    try:
        config.require_api_key()
    except ConfigurationError:
        logger.error(
            "Study aborted: missing API key",
            extra={"event": "study_failed", "run_id": run_id, "mode": mode},
        )
        raise

    prompt = build_prompt(request)
    client = client or GenerationClient(config)
    policy = RetryPolicy(
        max_attempts=config.max_attempts,
        base_delay=config.base_delay_seconds,
        sleep=sleep,
    )

    try:
        study = await policy.run(
            lambda: client.generate(prompt, request, run_id=run_id),
            run_id=run_id,
        )
    except StudyGenerationFailed:
        logger.error(
            "Study generation failed",
            extra={
                "event": "study_failed",
                "run_id": run_id,
                "mode": mode,
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )
        raise

    logger.info(
        "Study completed successfully",
        extra={
            "event": "study_complete",
            "run_id": run_id,
            "mode": mode,
            "duration_ms": int((time.time() - start_time) * 1000),
        },
    )
    return study
