"""Profile completion metrics derived from the shared profile and the schema."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from core.profile_schema import PROFILE_SCHEMA, MultiSelectField, ProfileSchema, iter_schema_fields
from core.validation import is_value_present

# Percentage reported for a schema without any fields.
EMPTY_SCHEMA_PERCENTAGE = 0


@dataclass(frozen=True)
class CompletionStat:
    """Filled versus declared field counts for a profile."""

    filled_count: int
    total_count: int
    percentage: int


def _section_values(profile: Mapping[str, Any], section: str) -> Mapping[str, Any]:
    values = profile.get(section)
    return values if isinstance(values, Mapping) else {}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_stat(profile: Mapping[str, Any], schema: ProfileSchema = PROFILE_SCHEMA) -> CompletionStat:
    """Count filled fields across every section of ``schema``.

    Required and optional fields count alike. A field is filled when its value
    is present and non-empty; multi-valued answers need at least one element.
    """

    total = 0
    filled = 0
    for section, field_name, _definition in iter_schema_fields(schema):
        total += 1
        if is_value_present(_section_values(profile, section).get(field_name)):
            filled += 1
    if total == 0:
        return CompletionStat(filled_count=0, total_count=0, percentage=EMPTY_SCHEMA_PERCENTAGE)
    return CompletionStat(filled_count=filled, total_count=total, percentage=_round_half_up(100 * filled / total))


def completion_percentage(profile: Mapping[str, Any], schema: ProfileSchema = PROFILE_SCHEMA) -> int:
    """Return the 0-100 completion percentage of ``profile``."""

    return completion_stat(profile, schema).percentage


def is_profile_complete(profile: Mapping[str, Any], schema: ProfileSchema = PROFILE_SCHEMA) -> bool:
    """Return ``True`` when every schema field is filled within its item bounds."""

    for section, field_name, definition in iter_schema_fields(schema):
        value = _section_values(profile, section).get(field_name)
        if not is_value_present(value):
            return False
        if isinstance(definition, MultiSelectField) and isinstance(value, (list, tuple)):
            if definition.min_items is not None and len(value) < definition.min_items:
                return False
            if definition.max_items is not None and len(value) > definition.max_items:
                return False
    return True


__all__ = [
    "CompletionStat",
    "EMPTY_SCHEMA_PERCENTAGE",
    "completion_percentage",
    "completion_stat",
    "is_profile_complete",
]
