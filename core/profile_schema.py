"""Declarative field schema for the multi-section user profile.

Every profile field is described by one of four frozen Pydantic models that
share a ``kind`` discriminator. The question generator and the validation
evaluator match on these classes, so adding a new kind means adding a new
model here and a new ``case`` arm in both places.

The default :data:`PROFILE_SCHEMA` groups the fields into the six sections the
onboarding flow walks through. Field order inside a section is significant:
question indices are derived from it and must stay stable across runs.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Any, Iterator, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from core.errors import UnknownSectionError


class Section(StrEnum):
    """Profile sections in onboarding order."""

    SKIN = "skin"
    HAIR = "hair"
    LIFESTYLE = "lifestyle"
    HEALTH = "health"
    MAKEUP = "makeup"
    PREFERENCES = "preferences"


SECTION_ORDER: tuple[Section, ...] = tuple(Section)


def humanize_value(value: str) -> str:
    """Return a display label for an option value (``dark_spots`` -> ``Dark Spots``)."""

    words = value.replace("_", " ").replace("-", " ").split()
    if not words:
        return value
    return " ".join(word if word.isupper() or not word.isalpha() else word.capitalize() for word in words)


class FieldOption(BaseModel):
    """Selectable option for single and multi select fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: str
    label: str


def _coerce_options(value: object) -> object:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        return value
    options: list[object] = []
    for item in value:
        if isinstance(item, str):
            options.append({"value": item, "label": humanize_value(item)})
        else:
            options.append(item)
    return tuple(options)


class _FieldBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    required: bool = False
    placeholder: str | None = None
    description: str | None = None


class _SelectFieldBase(_FieldBase):
    options: tuple[FieldOption, ...] = ()
    custom_allowed: bool = False

    @field_validator("options", mode="before")
    @classmethod
    def _normalise_options(cls, value: object) -> object:
        """Accept plain strings as options and derive their display label."""

        return _coerce_options(value)

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options)


class SingleSelectField(_SelectFieldBase):
    """Exactly one value picked from ``options``."""

    kind: Literal["single_select"] = "single_select"


class MultiSelectField(_SelectFieldBase):
    """Any number of values picked from ``options``, bounded by item counts."""

    kind: Literal["multi_select"] = "multi_select"
    min_items: int | None = None
    max_items: int | None = None

    @model_validator(mode="after")
    def _check_item_bounds(self) -> "MultiSelectField":
        if self.min_items is not None and self.min_items < 0:
            raise ValueError("min_items must be >= 0")
        if self.max_items is not None and self.max_items < 1:
            raise ValueError("max_items must be >= 1")
        if self.min_items is not None and self.max_items is not None and self.min_items > self.max_items:
            raise ValueError("min_items cannot exceed max_items")
        return self


class FreeTextField(_FieldBase):
    """Unconstrained text answer."""

    kind: Literal["free_text"] = "free_text"


class NumericField(_FieldBase):
    """Number answer with optional inclusive bounds."""

    kind: Literal["numeric"] = "numeric"
    min: float | None = None
    max: float | None = None
    step: float | None = None
    unit: str | None = None

    @model_validator(mode="after")
    def _check_range(self) -> "NumericField":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min cannot exceed max")
        if self.step is not None and self.step <= 0:
            raise ValueError("step must be positive")
        return self


FieldDefinition = Annotated[
    Union[SingleSelectField, MultiSelectField, FreeTextField, NumericField],
    Field(discriminator="kind"),
]

SectionSchema = Mapping[str, FieldDefinition]
ProfileSchema = Mapping[str, SectionSchema]

_FIELD_ADAPTER: TypeAdapter[FieldDefinition] = TypeAdapter(FieldDefinition)


def build_field(payload: Mapping[str, Any]) -> FieldDefinition:
    """Validate a raw field payload into its typed definition."""

    return _FIELD_ADAPTER.validate_python(dict(payload))


def build_schema(raw: Mapping[str, Mapping[str, Any]]) -> ProfileSchema:
    """Validate ``raw`` into a read-only schema, preserving declaration order.

    Raises:
        pydantic.ValidationError: If any field definition is malformed.
    """

    sections: dict[str, SectionSchema] = {}
    for section_name, fields in raw.items():
        built: dict[str, FieldDefinition] = {}
        for field_name, payload in fields.items():
            built[field_name] = payload if isinstance(payload, BaseModel) else build_field(payload)
        sections[str(section_name)] = MappingProxyType(built)
    return MappingProxyType(sections)


def get_section_schema(schema: ProfileSchema, section: str) -> SectionSchema:
    """Return the field map for ``section`` or raise :class:`UnknownSectionError`."""

    try:
        return schema[section]
    except KeyError:
        raise UnknownSectionError(str(section), schema.keys()) from None


def iter_schema_fields(
    schema: ProfileSchema,
    *,
    required_only: bool = False,
) -> Iterator[tuple[str, str, FieldDefinition]]:
    """Yield ``(section, field, definition)`` triples in declaration order."""

    for section_name, fields in schema.items():
        for field_name, definition in fields.items():
            if required_only and not definition.required:
                continue
            yield str(section_name), field_name, definition


_SKIN_CONCERNS = [
    "acne",
    "dark_spots",
    "wrinkles",
    "dryness",
    "oiliness",
    "sensitivity",
    "uneven_tone",
    "large_pores",
    "blackheads",
    "whiteheads",
]

_BUDGET_RANGES = ["budget", "mid_range", "luxury", "mixed"]

_RAW_PROFILE_SCHEMA: dict[str, dict[str, dict[str, Any]]] = {
    Section.SKIN: {
        "skin_type": {
            "kind": "single_select",
            "label": "Skin Type",
            "required": True,
            "options": ["dry", "oily", "combination", "normal"],
            "description": "Your primary skin type",
        },
        "skin_tone": {
            "kind": "single_select",
            "label": "Skin Tone",
            "required": True,
            "options": ["fair", "light", "medium", "tan", "deep"],
            "description": "Your skin tone/complexion",
        },
        "undertone": {
            "kind": "single_select",
            "label": "Undertone",
            "required": True,
            "options": ["warm", "cool", "neutral"],
            "description": "Your skin undertone",
        },
        "primary_skin_concerns": {
            "kind": "multi_select",
            "label": "Primary Skin Concerns",
            "required": True,
            "options": _SKIN_CONCERNS,
            "min_items": 1,
            "max_items": 5,
            "description": "Your main skin concerns",
        },
        "secondary_skin_concerns": {
            "kind": "multi_select",
            "label": "Secondary Skin Concerns",
            "required": False,
            "options": _SKIN_CONCERNS,
            "description": "Additional skin concerns (optional)",
        },
        "skin_sensitivity_level": {
            "kind": "single_select",
            "label": "Skin Sensitivity Level",
            "required": True,
            "options": ["low", "medium", "high"],
            "description": "How sensitive is your skin?",
        },
        "known_allergies": {
            "kind": "multi_select",
            "label": "Known Allergies",
            "required": False,
            "options": [
                "fragrance",
                "alcohol",
                "sulfates",
                "parabens",
                "retinoids",
                "aha_bha",
                "vitamin_c",
                "niacinamide",
            ],
            "custom_allowed": True,
            "description": "Any known ingredient allergies",
        },
    },
    Section.HAIR: {
        "hair_type": {
            "kind": "single_select",
            "label": "Hair Type",
            "required": True,
            "options": ["straight", "wavy", "curly", "coily"],
            "description": "Your natural hair pattern",
        },
        "hair_texture": {
            "kind": "single_select",
            "label": "Hair Texture",
            "required": True,
            "options": ["fine", "medium", "thick"],
            "description": "The thickness of individual hair strands",
        },
        "hair_porosity": {
            "kind": "single_select",
            "label": "Hair Porosity",
            "required": False,
            "options": ["low", "medium", "high"],
            "description": "How well your hair absorbs moisture (optional)",
        },
        "scalp_condition": {
            "kind": "single_select",
            "label": "Scalp Condition",
            "required": True,
            "options": ["dry", "oily", "normal", "sensitive"],
            "description": "Your scalp type and condition",
        },
        "hair_concerns": {
            "kind": "multi_select",
            "label": "Hair Concerns",
            "required": True,
            "options": [
                "hair_fall",
                "dandruff",
                "dryness",
                "oiliness",
                "frizz",
                "breakage",
                "thinning",
                "scalp_irritation",
            ],
            "min_items": 1,
            "description": "Your main hair and scalp concerns",
        },
        "chemical_treatments": {
            "kind": "multi_select",
            "label": "Chemical Treatments",
            "required": False,
            "options": ["color", "bleach", "keratin", "perm", "relaxer", "highlights"],
            "description": "Recent chemical treatments on your hair",
        },
    },
    Section.LIFESTYLE: {
        "location_city": {
            "kind": "free_text",
            "label": "City",
            "required": True,
            "placeholder": "e.g. Mumbai",
            "description": "Your current city",
        },
        "location_country": {
            "kind": "free_text",
            "label": "Country",
            "required": True,
            "placeholder": "e.g. India",
            "description": "Your current country",
        },
        "climate_type": {
            "kind": "single_select",
            "label": "Climate Type",
            "required": True,
            "options": ["tropical", "dry", "temperate", "continental", "polar"],
            "description": "The climate where you live",
        },
        "pollution_level": {
            "kind": "single_select",
            "label": "Pollution Level",
            "required": True,
            "options": ["low", "moderate", "high", "severe"],
            "description": "Air pollution level in your area",
        },
        "sun_exposure_daily": {
            "kind": "single_select",
            "label": "Daily Sun Exposure",
            "required": True,
            "options": ["minimal", "low", "moderate", "high"],
            "description": "How much sun exposure do you get daily?",
        },
        "sleep_hours_avg": {
            "kind": "numeric",
            "label": "Average Sleep Hours",
            "required": True,
            "min": 4,
            "max": 12,
            "step": 0.5,
            "unit": "hours",
            "description": "Average hours of sleep per night",
        },
        "stress_level": {
            "kind": "single_select",
            "label": "Stress Level",
            "required": True,
            "options": ["low", "moderate", "high", "severe"],
            "description": "Your typical stress level",
        },
        "exercise_frequency": {
            "kind": "single_select",
            "label": "Exercise Frequency",
            "required": True,
            "options": [
                {"value": "never", "label": "Never"},
                {"value": "rarely", "label": "Rarely"},
                {"value": "weekly", "label": "Weekly"},
                {"value": "3_times_week", "label": "3 times a week"},
                {"value": "daily", "label": "Daily"},
            ],
            "description": "How often do you exercise?",
        },
        "water_intake_daily": {
            "kind": "numeric",
            "label": "Daily Water Intake",
            "required": False,
            "min": 1,
            "max": 20,
            "unit": "glasses",
            "description": "Number of glasses of water per day",
        },
    },
    Section.HEALTH: {
        "age": {
            "kind": "numeric",
            "label": "Age",
            "required": True,
            "min": 13,
            "max": 100,
            "description": "Your current age",
        },
        "hormonal_status": {
            "kind": "single_select",
            "label": "Hormonal Status",
            "required": False,
            "options": ["normal", "pregnancy", "breastfeeding", "menopause", "pcos", "thyroid"],
            "description": "Any hormonal conditions affecting your skin",
        },
        "medications": {
            "kind": "multi_select",
            "label": "Current Medications",
            "required": False,
            "options": [
                "birth_control",
                "blood_pressure",
                "acne_medication",
                "hormone_therapy",
                "antibiotics",
                "antidepressants",
                "other",
            ],
            "custom_allowed": True,
            "description": "Medications that might affect your skin",
        },
        "skin_medical_conditions": {
            "kind": "multi_select",
            "label": "Skin Medical Conditions",
            "required": False,
            "options": [
                "eczema",
                "psoriasis",
                "rosacea",
                "dermatitis",
                "melasma",
                "vitiligo",
                "keratosis_pilaris",
                "seborrheic_dermatitis",
            ],
            "custom_allowed": True,
            "description": "Any diagnosed skin conditions",
        },
        "dietary_type": {
            "kind": "single_select",
            "label": "Dietary Type",
            "required": False,
            "options": ["omnivore", "vegetarian", "vegan", "pescatarian"],
            "description": "Your dietary preferences",
        },
        "supplements": {
            "kind": "multi_select",
            "label": "Supplements",
            "required": False,
            "options": ["vitamin_c", "vitamin_d", "vitamin_e", "biotin", "collagen", "omega_3", "zinc", "iron"],
            "custom_allowed": True,
            "description": "Supplements you take regularly",
        },
    },
    Section.MAKEUP: {
        "makeup_frequency": {
            "kind": "single_select",
            "label": "Makeup Frequency",
            "required": True,
            "options": ["never", "special_occasions", "weekly", "daily", "multiple_daily"],
            "description": "How often do you wear makeup?",
        },
        "preferred_look": {
            "kind": "single_select",
            "label": "Preferred Look",
            "required": False,
            "options": ["natural", "professional", "glam", "dramatic", "artistic"],
            "description": "Your preferred makeup style",
        },
        "coverage_preference": {
            "kind": "single_select",
            "label": "Coverage Preference",
            "required": False,
            "options": ["none", "light", "medium", "full"],
            "description": "Preferred foundation coverage level",
        },
        "budget_range": {
            "kind": "single_select",
            "label": "Budget Range",
            "required": False,
            "options": _BUDGET_RANGES,
            "description": "Your typical budget for beauty products",
        },
        "favorite_brands": {
            "kind": "multi_select",
            "label": "Favorite Brands",
            "required": False,
            "options": [
                {"value": "l_oreal", "label": "L'Oréal"},
                {"value": "maybelline", "label": "Maybelline"},
                {"value": "revlon", "label": "Revlon"},
                {"value": "covergirl", "label": "CoverGirl"},
                {"value": "neutrogena", "label": "Neutrogena"},
                {"value": "cetaphil", "label": "Cetaphil"},
                {"value": "cerave", "label": "CeraVe"},
                {"value": "la_roche_posay", "label": "La Roche-Posay"},
                {"value": "clinique", "label": "Clinique"},
                {"value": "estee_lauder", "label": "Estée Lauder"},
            ],
            "custom_allowed": True,
            "description": "Brands you prefer or trust",
        },
    },
    Section.PREFERENCES: {
        "budget_range": {
            "kind": "single_select",
            "label": "Monthly Beauty Budget",
            "required": True,
            "options": _BUDGET_RANGES,
            "description": "Your overall beauty budget preference",
        },
        "favorite_brands": {
            "kind": "multi_select",
            "label": "Favorite Beauty Brands",
            "required": False,
            "options": [
                {"value": brand, "label": brand}
                for brand in (
                    "The Ordinary",
                    "CeraVe",
                    "Neutrogena",
                    "Olay",
                    "Clinique",
                    "Estee Lauder",
                    "SK-II",
                    "Drunk Elephant",
                    "Paula's Choice",
                    "Minimalist",
                    "Plum",
                    "Mamaearth",
                    "Biotique",
                    "Forest Essentials",
                )
            ],
            "custom_allowed": True,
            "description": "Select your preferred beauty brands",
        },
        "ingredient_preference": {
            "kind": "multi_select",
            "label": "Ingredient Preference",
            "required": False,
            "options": [
                "natural",
                "organic",
                "vegan",
                "cruelty_free",
                "clean_beauty",
                "k_beauty",
                "ayurvedic",
                "clinical",
                "no_preference",
            ],
            "description": "Product ingredient preferences",
        },
    },
}

PROFILE_SCHEMA: ProfileSchema = build_schema(_RAW_PROFILE_SCHEMA)


__all__ = [
    "FieldDefinition",
    "FieldOption",
    "FreeTextField",
    "MultiSelectField",
    "NumericField",
    "PROFILE_SCHEMA",
    "ProfileSchema",
    "SECTION_ORDER",
    "Section",
    "SectionSchema",
    "SingleSelectField",
    "build_field",
    "build_schema",
    "get_section_schema",
    "humanize_value",
    "iter_schema_fields",
]
