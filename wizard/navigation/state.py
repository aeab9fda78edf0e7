"""Navigation state snapshot for a questionnaire run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class QuestionStatus(StrEnum):
    """Position of a question relative to the navigation cursor."""

    NOT_REACHED = "not_reached"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class NavigationState:
    """Immutable view of the navigator handed to the presentation layer.

    ``active_index`` is ``None`` only for an empty question sequence.
    """

    active_index: int | None
    total: int
    completed: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def is_terminal(self) -> bool:
        """``True`` once the last question is active (or nothing is left to ask)."""

        return self.active_index is None or self.active_index == self.total - 1

    @property
    def progress_percentage(self) -> int:
        if self.active_index is None or self.total == 0:
            return 100
        return int(100 * (self.active_index + 1) / self.total + 0.5)


__all__ = ["NavigationState", "QuestionStatus"]
