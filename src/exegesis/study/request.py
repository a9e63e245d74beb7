"""
Study Request Model

Immutable value describing what the caller wants generated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Translation(str, Enum):
    """Supported Bible translations (Portuguese and English)."""

    NVI = "NVI"
    ARC = "ARC"
    ACF = "ACF"
    KJA = "KJA"
    NVT = "NVT"
    NAA = "NAA"
    KJV = "KJV"
    NIV = "NIV"
    ESV = "ESV"


class Depth(str, Enum):
    """Study depth, only meaningful in passage mode."""

    QUICK = "quick"
    DETAILED = "detailed"
    ACADEMIC = "academic"
    SERMON = "sermon"


class Mode(str, Enum):
    """Selects which schema and prompt template apply."""

    PASSAGE = "passage"
    BOOK = "book"


@dataclass(frozen=True)
class StudyRequest:
    """
    What the caller asked for.

    `subject` is a passage reference ("Mateus 3:11") in passage mode and a
    book name ("Romanos") in book mode. `depth` is retained in book mode but
    ignored there. An unknown depth string is kept as-is so the prompt builder
    can fall back to the detailed fragments instead of failing.
    """

    subject: str
    translation: Translation = Translation.NVI
    depth: Union[Depth, str] = Depth.DETAILED
    mode: Mode = Mode.PASSAGE

    def __post_init__(self):
        if not isinstance(self.subject, str) or not self.subject.strip():
            raise ValueError("subject must be a non-empty string")

        object.__setattr__(self, "subject", self.subject.strip())
        object.__setattr__(self, "translation", Translation(self.translation))
        object.__setattr__(self, "mode", Mode(self.mode))

        try:
            object.__setattr__(self, "depth", Depth(self.depth))
        except ValueError:
            pass

    @property
    def is_book(self) -> bool:
        return self.mode == Mode.BOOK
