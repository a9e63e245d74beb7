"""
Study Data Model

Canonical, mode-tagged result consumed by the viewer and the exporters.
StudyResult is a discriminated union on `mode`: a PassageStudy never carries
bookIntro and a BookStudy never carries summary/content/sermon/slides.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from exegesis.study.request import Translation


class StudyModel(BaseModel):
    """Base for all study payload models: immutable, extra keys dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class StudyMeta(StudyModel):
    reference: str
    translation: Translation
    generated_at: str


# --- Passage study ---


class Summary(StudyModel):
    executive: str
    key_quote: str
    preaching_points: List[str]


class ParallelPassage(StudyModel):
    reference: str
    text: str
    correlation: str


class LexicalEntry(StudyModel):
    word: str
    lemma: str
    transliteration: str = ""
    morphology: str = ""
    meaning: str


class TheologicalPosition(StudyModel):
    tradition: str
    summary: str


class Theologian(StudyModel):
    name: str
    era: str
    view: str


class BibliographicEntry(StudyModel):
    author: str
    title: str
    publisher: Optional[str] = None
    year: Optional[str] = None
    annotation: str


class PassageContent(StudyModel):
    text_base: str
    intro_definition: str
    context_literary: str
    context_historical: str
    parallels: List[ParallelPassage]
    lexical_analysis: List[LexicalEntry]
    intertextuality: str = ""
    interpretations: List[TheologicalPosition]
    theologians: List[Theologian]
    implications: str
    study_questions: List[str] = Field(default_factory=list)
    bibliography: List[BibliographicEntry]


class SermonPoint(StudyModel):
    title: str
    explanation: str
    illustration: str
    application: str


class Sermon(StudyModel):
    title: str
    text_focus: str
    introduction: str
    points: List[SermonPoint]
    conclusion: str


class Slide(StudyModel):
    title: str
    bullets: List[str]
    image_hint: str = ""


class PassageStudy(StudyModel):
    mode: Literal["passage"] = "passage"
    meta: StudyMeta
    summary: Summary
    content: PassageContent
    sermon: Sermon
    slides: List[Slide]


# --- Book introduction ---


class GeneralIdentification(StudyModel):
    name: str
    original_name: str
    canon_position: str


class Authorship(StudyModel):
    author_traditional: str
    internal_evidence: str
    external_evidence: str
    academic_debate: str


class Dating(StudyModel):
    approximate_date: str
    historical_context: str
    contemporary_events: str
    arguments: str


class Recipients(StudyModel):
    target_audience: str
    location: str
    social_conditions: str
    spiritual_situation: str


class CulturalContext(StudyModel):
    political_panorama: str
    culture_customs: str
    economic_social: str
    neighbors_relation: str


class CanonicalContext(StudyModel):
    relation_prev_next: str
    continuity_rupture: str
    promise_fulfillment: str
    narrative_preparation: str


class Purpose(StudyModel):
    main_objective: str
    problems_addressed: str
    intent: str


class LiteraryStructure(StudyModel):
    sections: List[str]
    progression: str
    genre: str


class Style(StudyModel):
    literary_features: str
    keywords: List[str]
    techniques: str


class Character(StudyModel):
    name: str
    role: str


class Theology(StudyModel):
    doctrines: List[str]
    contributions: str
    controversies: str


class KeyPassage(StudyModel):
    reference: str
    description: str


class RedemptivePlan(StudyModel):
    christ_pointer: str
    salvation_relation: str


class Application(StudyModel):
    principles: List[str]
    church_relevance: str
    pastoral_implications: str


class InterpretationChallenges(StudyModel):
    difficult_texts: List[str]
    hermeneutic_problems: str


class BookIntro(StudyModel):
    general_id: GeneralIdentification
    authorship: Authorship
    dating: Dating
    recipients: Recipients
    context_cultural: CulturalContext
    context_canonical: CanonicalContext
    purpose: Purpose
    themes: List[str]
    central_message: str
    structure: LiteraryStructure
    style: Style
    characters: List[Character]
    theology: Theology
    key_passages: List[KeyPassage]
    redemptive_plan: RedemptivePlan
    application: Application
    interpretation_challenges: InterpretationChallenges
    conclusion: str


class BookStudy(StudyModel):
    mode: Literal["book"] = "book"
    meta: StudyMeta
    book_intro: BookIntro = Field(alias="bookIntro")


StudyResult = Annotated[Union[PassageStudy, BookStudy], Field(discriminator="mode")]

_study_adapter = TypeAdapter(StudyResult)


def parse_study(data: dict) -> Union[PassageStudy, BookStudy]:
    """Build the typed result; `data` must already carry its `mode` tag."""
    return _study_adapter.validate_python(data)


def dump_study(study: Union[PassageStudy, BookStudy]) -> dict:
    """Serialize with wire names (bookIntro) and without None-valued optionals."""
    return study.model_dump(mode="json", by_alias=True, exclude_none=True)
