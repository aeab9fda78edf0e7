from __future__ import annotations

from typing import Any

from core.completion import completion_percentage, completion_stat, is_profile_complete
from core.profile_schema import PROFILE_SCHEMA, build_schema
from tests.utils import skin_schema


def _text_schema(sections: dict[str, int]):
    return build_schema(
        {
            section: {f"{section}_field_{index}": {"kind": "free_text", "label": f"Field {index}"} for index in range(count)}
            for section, count in sections.items()
        }
    )


def test_ten_fields_with_four_filled_is_forty_percent() -> None:
    schema = _text_schema({"skin": 6, "hair": 4})
    profile = {
        "skin": {"skin_field_0": "a", "skin_field_1": "b"},
        "hair": {"hair_field_0": "c", "hair_field_3": "d"},
    }

    stat = completion_stat(profile, schema)

    assert (stat.filled_count, stat.total_count, stat.percentage) == (4, 10, 40)
    assert completion_percentage(profile, schema) == 40


def test_empty_values_count_as_unfilled() -> None:
    schema = skin_schema()
    profile: dict[str, Any] = {"skin": {"skin_type": "oily", "primary_concerns": [], "skin_goals": "   "}}

    assert completion_stat(profile, schema).filled_count == 1


def test_optional_fields_count_towards_total() -> None:
    profile = {"skin": {"skin_type": "oily", "primary_concerns": ["acne"]}}

    assert completion_percentage(profile, skin_schema()) == 67
    assert completion_percentage(profile, skin_schema(include_optional=False)) == 100


def test_percentage_rounds_half_up() -> None:
    schema = _text_schema({"skin": 8})

    assert completion_percentage({"skin": {"skin_field_0": "x"}}, schema) == 13


def test_empty_schema_reports_zero() -> None:
    stat = completion_stat({}, build_schema({}))

    assert stat.total_count == 0
    assert stat.percentage == 0


def test_malformed_sections_are_ignored() -> None:
    assert completion_percentage({"skin": "oily"}, skin_schema()) == 0


def test_default_schema_starts_empty() -> None:
    assert completion_percentage({}) == 0
    assert not is_profile_complete({})


def test_profile_complete_requires_item_bounds() -> None:
    schema = skin_schema(include_optional=False)
    too_many = ["acne", "aging", "dark_spots", "dryness", "redness", "texture"]

    assert is_profile_complete({"skin": {"skin_type": "oily", "primary_concerns": ["acne"]}}, schema)
    assert not is_profile_complete({"skin": {"skin_type": "oily", "primary_concerns": too_many}}, schema)
    assert not is_profile_complete({"skin": {"skin_type": "oily"}}, schema)


def test_every_default_field_filled_is_complete() -> None:
    profile: dict[str, dict[str, Any]] = {}
    for section, fields in PROFILE_SCHEMA.items():
        profile[section] = {}
        for field_name, definition in fields.items():
            options = getattr(definition, "option_values", ())
            if definition.kind == "multi_select":
                profile[section][field_name] = list(options[:1]) or ["custom"]
            elif definition.kind == "numeric":
                profile[section][field_name] = str(int(definition.min or 1))
            else:
                profile[section][field_name] = options[0] if options else "value"

    assert completion_percentage(profile) == 100
    assert is_profile_complete(profile)
