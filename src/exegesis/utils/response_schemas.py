"""
Response Schemas

Structural contracts for the generative service output, expressed as plain
data (SchemaNode) rather than a provider-specific schema object.
Each contract is used twice: rendered to JSON schema to constrain generation,
and walked by validate_against_schema() to check the parsed result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from exegesis.study.request import Mode


class SchemaType(str, Enum):
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class SchemaNode:
    """A node of the structural contract: a string, an array or an object."""

    type: SchemaType
    description: Optional[str] = None
    properties: Mapping[str, "SchemaNode"] = field(default_factory=dict)
    required: Tuple[str, ...] = ()
    items: Optional["SchemaNode"] = None

    def to_json_schema(self) -> dict:
        """Render to the JSON-schema dialect accepted as a response_schema."""
        rendered: dict = {"type": self.type.value}
        if self.description:
            rendered["description"] = self.description

        if self.type == SchemaType.OBJECT:
            rendered["properties"] = {
                name: node.to_json_schema() for name, node in self.properties.items()
            }
            if self.required:
                rendered["required"] = list(self.required)
        elif self.type == SchemaType.ARRAY and self.items is not None:
            rendered["items"] = self.items.to_json_schema()

        return rendered


# --- Builders ---


def string(description: Optional[str] = None) -> SchemaNode:
    return SchemaNode(SchemaType.STRING, description=description)


def array_of(items: SchemaNode, description: Optional[str] = None) -> SchemaNode:
    return SchemaNode(SchemaType.ARRAY, description=description, items=items)


def string_list(description: Optional[str] = None) -> SchemaNode:
    return array_of(string(), description=description)


def obj(
    properties: Mapping[str, SchemaNode],
    optional: Iterable[str] = (),
    description: Optional[str] = None,
) -> SchemaNode:
    """Object node; every property is required unless listed in `optional`."""
    optional = set(optional)
    unknown = optional - set(properties)
    if unknown:
        raise ValueError(f"Optional fields not declared as properties: {sorted(unknown)}")

    return SchemaNode(
        SchemaType.OBJECT,
        description=description,
        properties=dict(properties),
        required=tuple(name for name in properties if name not in optional),
    )


def text_section(*names: str) -> SchemaNode:
    """Object made only of required string fields."""
    return obj({name: string() for name in names})


# --- Shared ---

META_SCHEMA = obj(
    {
        "reference": string(),
        "translation": string(),
        "generated_at": string(),
    },
    optional=("generated_at",),
)


# --- Passage study ---

PARALLEL_SCHEMA = obj(
    {
        "reference": string(),
        "text": string(),
        "correlation": string(
            "Relationship type: Synoptic, OT Quote, thematic parallel"
        ),
    }
)

LEXICAL_ENTRY_SCHEMA = obj(
    {
        "word": string(),
        "lemma": string(),
        "transliteration": string(),
        "morphology": string(
            "Strict morphological breakdown: part of speech, tense, voice, mood, case, "
            "gender, number (e.g. 'Verbo Aoristo Indicativo Ativo, 3ª Sing')"
        ),
        "meaning": string(
            "Definition and at least 2 distinct semantic nuances or translation options"
        ),
    },
    optional=("transliteration", "morphology"),
)

INTERPRETATION_SCHEMA = obj(
    {
        "tradition": string(
            "Name of the tradition (e.g. Judaica, Patrística, Reformada, Dispensacionalista)"
        ),
        "summary": string(),
    }
)

THEOLOGIAN_SCHEMA = obj(
    {
        "name": string(),
        "era": string(
            "Historical period/century (e.g. 'Patrística (Séc IV)', 'Reforma (Séc XVI)', "
            "'Contemporâneo')"
        ),
        "view": string("Summary of their specific view on this passage"),
    }
)

BIBLIOGRAPHY_SCHEMA = obj(
    {
        "author": string(),
        "title": string(),
        "publisher": string(),
        "year": string(),
        "annotation": string("Brief comment on why this source is valuable"),
    },
    optional=("publisher", "year"),
)

SERMON_POINT_SCHEMA = obj(
    {
        "title": string(),
        "explanation": string(
            "Explicação exegética. REGRA ESTRITA: cada afirmação termina com a referência "
            "bíblica exata entre parênteses. Ex: '...isto justifica o pecador (Rm 3:24)'."
        ),
        "illustration": string("Ilustração prática ou metáfora."),
        "application": string(
            "Aplicação direta. REGRA ESTRITA: fundamente o imperativo com o versículo entre "
            "parênteses. Ex: '...devemos orar sempre (1 Ts 5:17)'."
        ),
    }
)

SLIDE_SCHEMA = obj(
    {
        "title": string(),
        "bullets": string_list(),
        "image_hint": string(),
    },
    optional=("image_hint",),
)

PASSAGE_SCHEMA = obj(
    {
        "meta": META_SCHEMA,
        "summary": obj(
            {
                "executive": string(),
                "key_quote": string(
                    "A verse from the text OR a short inspirational quote summarizing the "
                    "core message, suitable for a book cover."
                ),
                "preaching_points": string_list(),
            }
        ),
        "content": obj(
            {
                "text_base": string(),
                "intro_definition": string(),
                "context_literary": string(),
                "context_historical": string(),
                "parallels": array_of(PARALLEL_SCHEMA),
                "lexical_analysis": array_of(LEXICAL_ENTRY_SCHEMA),
                "intertextuality": string(),
                "interpretations": array_of(INTERPRETATION_SCHEMA),
                "theologians": array_of(THEOLOGIAN_SCHEMA),
                "implications": string(),
                "study_questions": string_list(),
                "bibliography": array_of(BIBLIOGRAPHY_SCHEMA),
            },
            optional=("intertextuality", "study_questions"),
        ),
        "sermon": obj(
            {
                "title": string(
                    "Um título atraente, homilético e bíblico para o sermão."
                ),
                "text_focus": string(
                    "CRITICALLY MANDATORY: the specific verses focused on (e.g. 'João 3:16' "
                    "or 'Versículos 10 a 14'). This defines the sermon scope."
                ),
                "introduction": string("Gancho inicial e proposição do sermão"),
                "points": array_of(SERMON_POINT_SCHEMA),
                "conclusion": string("Resumo e apelo final"),
            }
        ),
        "slides": array_of(SLIDE_SCHEMA),
    }
)


# --- Book introduction (18 sections) ---

BOOK_INTRO_SECTIONS = (
    "general_id",
    "authorship",
    "dating",
    "recipients",
    "context_cultural",
    "context_canonical",
    "purpose",
    "themes",
    "central_message",
    "structure",
    "style",
    "characters",
    "theology",
    "key_passages",
    "redemptive_plan",
    "application",
    "interpretation_challenges",
    "conclusion",
)

BOOK_INTRO_SCHEMA = obj(
    {
        "general_id": text_section("name", "original_name", "canon_position"),
        "authorship": text_section(
            "author_traditional",
            "internal_evidence",
            "external_evidence",
            "academic_debate",
        ),
        "dating": text_section(
            "approximate_date",
            "historical_context",
            "contemporary_events",
            "arguments",
        ),
        "recipients": text_section(
            "target_audience",
            "location",
            "social_conditions",
            "spiritual_situation",
        ),
        "context_cultural": text_section(
            "political_panorama",
            "culture_customs",
            "economic_social",
            "neighbors_relation",
        ),
        "context_canonical": text_section(
            "relation_prev_next",
            "continuity_rupture",
            "promise_fulfillment",
            "narrative_preparation",
        ),
        "purpose": text_section("main_objective", "problems_addressed", "intent"),
        "themes": string_list(),
        "central_message": string(),
        "structure": obj(
            {
                "sections": string_list(),
                "progression": string(),
                "genre": string(),
            }
        ),
        "style": obj(
            {
                "literary_features": string(),
                "keywords": string_list(),
                "techniques": string(),
            }
        ),
        "characters": array_of(text_section("name", "role")),
        "theology": obj(
            {
                "doctrines": string_list(),
                "contributions": string(),
                "controversies": string(),
            }
        ),
        "key_passages": array_of(text_section("reference", "description")),
        "redemptive_plan": text_section("christ_pointer", "salvation_relation"),
        "application": obj(
            {
                "principles": string_list(),
                "church_relevance": string(),
                "pastoral_implications": string(),
            }
        ),
        "interpretation_challenges": obj(
            {
                "difficult_texts": string_list(),
                "hermeneutic_problems": string(),
            }
        ),
        "conclusion": string(),
    }
)

BOOK_SCHEMA = obj(
    {
        "meta": META_SCHEMA,
        "bookIntro": BOOK_INTRO_SCHEMA,
    }
)

SCHEMAS = {
    Mode.PASSAGE: PASSAGE_SCHEMA,
    Mode.BOOK: BOOK_SCHEMA,
}


def schema_for(mode: Mode) -> SchemaNode:
    return SCHEMAS[Mode(mode)]


# --- Validation ---

_PY_TYPES = {
    SchemaType.STRING: str,
    SchemaType.ARRAY: list,
    SchemaType.OBJECT: dict,
}


def validate_against_schema(
    data: Any, schema: SchemaNode, path: str = "$"
) -> List[str]:
    """
    Walk `data` against `schema` and return a list of violations.

    Missing required fields, nulls in required fields and type mismatches are
    reported with a JSON-path-like location. Unknown extra keys are ignored.
    An empty list means the data honours the contract.
    """
    expected = _PY_TYPES[schema.type]
    if not isinstance(data, expected):
        return [f"{path}: expected {schema.type.value}, got {type(data).__name__}"]

    errors: List[str] = []

    if schema.type == SchemaType.OBJECT:
        for name, node in schema.properties.items():
            child_path = f"{path}.{name}"
            value = data.get(name)
            if value is None:
                if name in schema.required:
                    errors.append(f"{child_path}: required field missing")
                continue
            errors.extend(validate_against_schema(value, node, child_path))

    elif schema.type == SchemaType.ARRAY and schema.items is not None:
        for index, item in enumerate(data):
            errors.extend(validate_against_schema(item, schema.items, f"{path}[{index}]"))

    return errors
