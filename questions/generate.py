"""Derive ordered, presentation-agnostic questions from the profile schema."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import List

from core.profile_schema import (
    FieldDefinition,
    FieldOption,
    FreeTextField,
    MultiSelectField,
    NumericField,
    ProfileSchema,
    SingleSelectField,
    get_section_schema,
)


class PresentationType(StrEnum):
    """How a question expects to be answered."""

    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    FREE_TEXT = "free-text"
    NUMERIC = "numeric"
    SCALAR_RANGE = "scalar-range"

    @property
    def is_numeric(self) -> bool:
        return self in (PresentationType.NUMERIC, PresentationType.SCALAR_RANGE)


# Numeric fields following the ``*level*`` / ``*intensity*`` naming are rendered as sliders.
SCALAR_RANGE_MARKERS: tuple[str, ...] = ("level", "intensity")

QUESTION_TEMPLATES: dict[str, str] = {
    "skin_type": "How does your skin feel?",
    "skin_tone": "What's your skin tone?",
    "undertone": "What's your undertone?",
    "primary_skin_concerns": "What bothers you most?",
    "skin_sensitivity_level": "How sensitive is your skin?",
    "known_allergies": "Any allergies or ingredients to avoid?",
    "location_city": "Which city do you live in?",
    "location_country": "Which country do you live in?",
    "climate_type": "What's your climate like?",
    "pollution_level": "Air quality in your area?",
    "sun_exposure_daily": "Daily sun exposure?",
    "sleep_hours_avg": "How many hours do you sleep?",
    "stress_level": "Stress level lately?",
    "exercise_frequency": "How often do you exercise?",
    "water_intake_daily": "Water intake per day?",
    "budget_range": "Monthly beauty budget?",
    "hair_type": "What's your hair type?",
    "hair_texture": "Hair texture?",
    "scalp_condition": "How's your scalp?",
    "age": "How old are you?",
    "hormonal_status": "Any hormonal considerations?",
    "medications": "Taking any medications?",
    "skin_medical_conditions": "Any skin conditions?",
    "makeup_frequency": "How often do you wear makeup?",
    "preferred_look": "Your go-to look?",
    "coverage_preference": "Coverage preference?",
}


@dataclass(frozen=True)
class Question:
    """One schema field prepared for a single questionnaire run.

    The record copies every constraint the validator needs so that the
    answer layer never has to reach back into the schema.
    """

    id: str
    section: str
    field_name: str
    presentation_type: PresentationType
    label: str
    prompt: str
    required: bool
    options: tuple[FieldOption, ...] = ()
    custom_allowed: bool = False
    min_items: int | None = None
    max_items: int | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    unit: str | None = None
    placeholder: str | None = None
    description: str | None = None

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options)


def question_id(section: str, field_name: str) -> str:
    """Return the stable question id for ``field_name`` within ``section``."""

    return f"{section}_{field_name}"


def infer_presentation_type(field_name: str, definition: FieldDefinition) -> PresentationType:
    """Map a field definition to its presentation type."""

    match definition:
        case MultiSelectField():
            return PresentationType.MULTI_CHOICE
        case NumericField():
            lowered = field_name.lower()
            if any(marker in lowered for marker in SCALAR_RANGE_MARKERS):
                return PresentationType.SCALAR_RANGE
            return PresentationType.NUMERIC
        case FreeTextField():
            return PresentationType.FREE_TEXT
        case SingleSelectField():
            return PresentationType.SINGLE_CHOICE
    raise TypeError(f"Unsupported field definition for '{field_name}': {type(definition).__name__}")


def build_question(section: str, field_name: str, definition: FieldDefinition) -> Question:
    """Return the :class:`Question` for a single schema field."""

    presentation_type = infer_presentation_type(field_name, definition)
    common = {
        "id": question_id(section, field_name),
        "section": section,
        "field_name": field_name,
        "presentation_type": presentation_type,
        "label": definition.label,
        "prompt": QUESTION_TEMPLATES.get(field_name) or definition.label,
        "required": definition.required,
        "placeholder": definition.placeholder,
        "description": definition.description,
    }
    match definition:
        case MultiSelectField():
            return Question(
                **common,
                options=definition.options,
                custom_allowed=definition.custom_allowed,
                min_items=definition.min_items,
                max_items=definition.max_items,
            )
        case SingleSelectField():
            return Question(**common, options=definition.options, custom_allowed=definition.custom_allowed)
        case NumericField():
            return Question(
                **common,
                min=definition.min,
                max=definition.max,
                step=definition.step,
                unit=definition.unit,
            )
        case FreeTextField():
            return Question(**common)
    raise TypeError(f"Unsupported field definition for '{field_name}': {type(definition).__name__}")


def generate_questions(
    schema: ProfileSchema,
    section: str,
    *,
    only_required: bool = False,
) -> List[Question]:
    """Return the ordered questions for ``section``.

    Args:
        schema: Profile schema to read from.
        section: Section name; must exist in ``schema``.
        only_required: Keep only fields flagged as required.

    Returns:
        Questions in the schema's declaration order. The result is a pure
        function of the inputs, so index ``n`` always denotes the same field.

    Raises:
        UnknownSectionError: If ``section`` is not part of ``schema``.
    """

    fields = get_section_schema(schema, section)
    section_name = str(section)
    return [
        build_question(section_name, field_name, definition)
        for field_name, definition in fields.items()
        if definition.required or not only_required
    ]


__all__ = [
    "PresentationType",
    "QUESTION_TEMPLATES",
    "Question",
    "SCALAR_RANGE_MARKERS",
    "build_question",
    "generate_questions",
    "infer_presentation_type",
    "question_id",
]
