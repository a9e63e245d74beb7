"""
Generation Client

Exactly one round-trip to the generative service, producing a normalized,
mode-tagged study. Retrying is the caller's concern (see study.retry).
"""

import asyncio
import json
import re
import time
from datetime import datetime, timezone
from typing import Any, Callable, Union

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from exegesis.client.client import get_llm_client, temperature_for
from exegesis.client.config import GenerationConfig
from exegesis.study.model import BookStudy, PassageStudy, parse_study
from exegesis.study.request import StudyRequest
from exegesis.utils.errors import GenerationError
from exegesis.utils.logger import get_logger
from exegesis.utils.prompts import PromptBundle
from exegesis.utils.response_schemas import validate_against_schema

logger = get_logger(__name__)

# Violations quoted in a GenerationError message
MAX_REPORTED_VIOLATIONS = 5

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


# --- Helpers ---


def extract_text(response: Any) -> str:
    """
    Pull the text out of a chat model response.

    Content may be a plain string or a list of content blocks
    (strings or dicts with a "text" key); text blocks are joined.
    """
    content = getattr(response, "content", response)

    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and isinstance(block.get("text"), str):
                parts.append(block["text"])
        return "".join(parts)
    return str(content)


def parse_json_payload(text: str) -> dict:
    """Parse model text as a JSON object, tolerating a Markdown code fence."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise GenerationError("Empty response from AI")

    fenced = _CODE_FENCE.match(cleaned)
    if fenced:
        cleaned = fenced.group(1)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise GenerationError(
            f"Response JSON must be an object, got {type(data).__name__}"
        )
    return data


def drop_nulls(value: Any) -> Any:
    """Remove null-valued keys so optional fields fall back to their model defaults."""
    if isinstance(value, dict):
        return {k: drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [drop_nulls(item) for item in value]
    return value


def normalize_study(
    data: dict, prompt: PromptBundle, request: StudyRequest
) -> Union[PassageStudy, BookStudy]:
    """
    Stamp and type the parsed payload.

    The model's own meta is discarded: reference and translation always
    echo the request, generated_at is the current UTC time.
    """
    payload = dict(data)
    payload["meta"] = {
        "reference": request.subject,
        "translation": request.translation.value,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    violations = validate_against_schema(payload, prompt.schema)
    if violations:
        shown = "; ".join(violations[:MAX_REPORTED_VIOLATIONS])
        raise GenerationError(
            f"Response violates the {prompt.mode.value} schema "
            f"({len(violations)} problems): {shown}"
        )

    # Null optional fields fall back to model defaults
    payload = drop_nulls(payload)
    payload["mode"] = prompt.mode.value
    try:
        return parse_study(payload)
    except ValidationError as e:
        raise GenerationError(f"Response could not be mapped to a study: {e}") from e


# --- Client ---


class GenerationClient:
    """
    Wraps a single structured-generation call.

    Args:
        config: Generation settings (credential, model, optional timeout)
        llm_factory: Builds the chat model; replaced by a fake in tests
    """

    def __init__(
        self,
        config: GenerationConfig,
        llm_factory: Callable[..., Any] = get_llm_client,
    ):
        self.config = config
        self.llm_factory = llm_factory

    async def generate(
        self, prompt: PromptBundle, request: StudyRequest, run_id: str | None = None
    ) -> Union[PassageStudy, BookStudy]:
        """
        Send the prompt and schema, then parse and normalize the reply.

        Raises:
            ConfigurationError: no API key configured (raised before any call)
            GenerationError: empty, unparseable or non-conforming output
        """
        self.config.require_api_key()

        start = time.time()
        temperature = temperature_for(prompt.depth)
        llm = self.llm_factory(self.config, prompt.schema, temperature)
        messages = [
            SystemMessage(content=prompt.system_instruction),
            HumanMessage(content=prompt.user_instruction),
        ]

        call = llm.ainvoke(messages)
        if self.config.request_timeout_seconds:
            response = await asyncio.wait_for(
                call, timeout=self.config.request_timeout_seconds
            )
        else:
            response = await call

        study = normalize_study(
            parse_json_payload(extract_text(response)), prompt, request
        )

        logger.info(
            "Generation succeeded",
            extra={
                "event": "generation_success",
                "run_id": run_id,
                "mode": prompt.mode.value,
                "depth": prompt.depth.value,
                "model": self.config.model,
                "duration_ms": int((time.time() - start) * 1000),
            },
        )
        return study
