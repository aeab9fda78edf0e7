"""Helpers shared across the test-suite."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from core.profile_schema import ProfileSchema, build_schema
from state.profile_store import ProfileStore


def clock_generator(start: float = 0.0) -> tuple[Callable[[], float], Callable[[float], float]]:
    """Return a ``(clock, advance)`` pair for driving timers without sleeping."""

    current = {"value": start}

    def _tick() -> float:
        return current["value"]

    def _advance(delta: float) -> float:
        current["value"] += delta
        return current["value"]

    return _tick, _advance


class RecordingStore(ProfileStore):
    """Profile store that remembers every ``merge_section`` call."""

    def __init__(self) -> None:
        super().__init__({})
        self.merges: list[tuple[str, dict[str, Any]]] = []

    def merge_section(self, section: str, values: Mapping[str, Any]) -> None:
        self.merges.append((str(section), dict(values)))
        super().merge_section(section, values)


def skin_schema(*, include_optional: bool = True) -> ProfileSchema:
    """Two required skin fields, optionally followed by a free-text field."""

    fields: dict[str, dict[str, Any]] = {
        "skin_type": {
            "kind": "single_select",
            "label": "Skin type",
            "required": True,
            "options": ["dry", "oily", "combination", "normal", "sensitive"],
        },
        "primary_concerns": {
            "kind": "multi_select",
            "label": "Primary concerns",
            "required": True,
            "options": ["acne", "aging", "dark_spots", "dryness", "redness", "texture"],
            "min_items": 1,
            "max_items": 5,
        },
    }
    if include_optional:
        fields["skin_goals"] = {"kind": "free_text", "label": "Skin goals"}
    return build_schema({"skin": fields})
