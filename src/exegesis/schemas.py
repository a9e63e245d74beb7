"""
API Schemas: Request/Response validation and sanitization.

Uses Pydantic for strict validation at the HTTP boundary.
"""

import re
from typing import List

from pydantic import BaseModel, Field, field_validator

from exegesis.study.request import Depth, Mode, StudyRequest, Translation


class StudyRequestBody(BaseModel):
    """
    Request payload for study generation.

    `subject` is a passage reference in passage mode and a book name in book mode.
    `depth` is accepted in book mode but ignored there.
    """

    subject: str = Field(
        ...,
        min_length=1,
        max_length=120,
        description="Passage reference (e.g., 'Mateus 3:11') or book name (e.g., 'Romanos')",
    )
    translation: Translation = Field(
        default=Translation.NVI,
        description="Bible translation code",
    )
    depth: Depth = Field(
        default=Depth.DETAILED,
        description="Study depth (passage mode only)",
    )
    mode: Mode = Field(
        default=Mode.PASSAGE,
        description="'passage' for an exegetical study, 'book' for a book introduction",
    )

    @field_validator("subject")
    @classmethod
    def sanitize_subject(cls, v: str) -> str:
        """Collapse whitespace and reject blank or control-character input."""
        v = re.sub(r"\s+", " ", v).strip()
        if not v:
            raise ValueError("Subject must not be blank")
        if re.search(r"[\x00-\x1f\x7f]", v):
            raise ValueError("Subject contains control characters")
        return v

    def to_request(self) -> StudyRequest:
        return StudyRequest(
            subject=self.subject,
            translation=self.translation,
            depth=self.depth,
            mode=self.mode,
        )


class StudyOptionsResponse(BaseModel):
    """Values accepted by the study endpoints."""

    translations: List[str]
    depths: List[str]
    modes: List[str]


class ErrorResponse(BaseModel):
    detail: str
