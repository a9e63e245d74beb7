"""
Study Controller

Thin controller layer that handles HTTP concerns and delegates
generation to the study service.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from exegesis.client.config import GenerationConfig
from exegesis.schemas import ErrorResponse, StudyOptionsResponse, StudyRequestBody
from exegesis.service.export_service import export_to_markdown
from exegesis.service.study_service import generate_study
from exegesis.study.model import dump_study
from exegesis.study.request import Depth, Mode, Translation
from exegesis.utils.errors import ConfigurationError, StudyGenerationFailed
from exegesis.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/study", tags=["Study"])

ERROR_RESPONSES = {
    500: {"model": ErrorResponse, "description": "Generation credential not configured"},
    502: {"model": ErrorResponse, "description": "Study generation failed"},
}


def get_generation_config() -> GenerationConfig:
    """Dependency: generation settings from the environment."""
    return GenerationConfig.from_env()


async def _run_generation(body: StudyRequestBody, config: GenerationConfig):
    try:
        return await generate_study(body.to_request(), config)
    except ConfigurationError as e:
        logger.error(
            "Study request rejected: generation not configured",
            extra={"event": "study_failed", "mode": body.mode.value, "status_code": 500},
        )
        raise HTTPException(status_code=500, detail=e.message)
    except StudyGenerationFailed as e:
        logger.error(
            f"Study request failed: {e.__cause__ or e}",
            extra={"event": "study_failed", "mode": body.mode.value, "status_code": 502},
        )
        raise HTTPException(status_code=502, detail=e.message)


@router.post(
    "",
    summary="Generate a study",
    description="Generates a passage study or a book introduction, tagged by mode.",
    responses=ERROR_RESPONSES,
)
async def create_study(
    body: StudyRequestBody,
    config: GenerationConfig = Depends(get_generation_config),
):
    """
    Generate a structured study.

    - **subject**: Passage reference or book name
    - **translation**: Translation code (e.g., "NVI", "KJV")
    - **depth**: quick | detailed | academic | sermon (passage mode only)
    - **mode**: passage | book

    Returns the study with `mode` as its tag; book studies carry `bookIntro`,
    passage studies carry `summary`, `content`, `sermon` and `slides`.
    """
    study = await _run_generation(body, config)
    return dump_study(study)


@router.post(
    "/markdown",
    response_class=PlainTextResponse,
    summary="Generate a study as Markdown",
    responses=ERROR_RESPONSES,
)
async def create_study_markdown(
    body: StudyRequestBody,
    config: GenerationConfig = Depends(get_generation_config),
):
    """Generate a study and return its Markdown export."""
    study = await _run_generation(body, config)
    return PlainTextResponse(export_to_markdown(study), media_type="text/markdown")


@router.get(
    "/options",
    response_model=StudyOptionsResponse,
    summary="List study options",
)
async def list_options():
    """Supported translations, depths and modes."""
    return StudyOptionsResponse(
        translations=[t.value for t in Translation],
        depths=[d.value for d in Depth],
        modes=[m.value for m in Mode],
    )
