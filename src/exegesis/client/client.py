"""
LLM Client Configuration

Builds the Gemini chat model for one study generation, constrained to
JSON output matching the selected response schema.
"""

from langchain_google_genai import ChatGoogleGenerativeAI

from exegesis.client.config import GenerationConfig
from exegesis.study.request import Depth
from exegesis.utils.logger import get_logger
from exegesis.utils.response_schemas import SchemaNode

logger = get_logger(__name__)


# Academic studies favour precision over creativity
ACADEMIC_TEMPERATURE = 0.2
DEFAULT_TEMPERATURE = 0.5


def temperature_for(depth: Depth) -> float:
    if depth == Depth.ACADEMIC:
        return ACADEMIC_TEMPERATURE
    return DEFAULT_TEMPERATURE


def get_llm_client(
    config: GenerationConfig, schema: SchemaNode, temperature: float
) -> ChatGoogleGenerativeAI:
    """
    Get a configured LLM client instance.

    Args:
        config: Generation settings carrying the API key and model name
        schema: Response contract the output must follow
        temperature: Sampling temperature (lower = more deterministic)

    Returns:
        ChatGoogleGenerativeAI requesting application/json output.
        Provider-side retries are disabled; RetryPolicy owns retrying.
    """
    api_key = config.require_api_key()

    return ChatGoogleGenerativeAI(
        model=config.model,
        temperature=temperature,
        api_key=api_key,
        max_retries=1,
        response_mime_type="application/json",
        response_schema=schema.to_json_schema(),
    )
