from __future__ import annotations

import logging
from typing import Sequence

from questions.generate import Question
from wizard.navigation.state import NavigationState, QuestionStatus

logger = logging.getLogger(__name__)


class QuestionNavigator:
    """Track the active question and the completed ones outside the UI layer.

    Users may revisit answered questions but never skip ahead: ``jump_to``
    accepts only completed indices or the active one and silently ignores
    everything else.
    """

    def __init__(self, questions: Sequence[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        self._active_index: int | None = 0 if self._questions else None
        self._completed: set[str] = set()

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def active_index(self) -> int | None:
        return self._active_index

    @property
    def active_question(self) -> Question | None:
        if self._active_index is None:
            return None
        return self._questions[self._active_index]

    @property
    def completed(self) -> frozenset[str]:
        return frozenset(self._completed)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def state(self) -> NavigationState:
        return NavigationState(
            active_index=self._active_index,
            total=len(self._questions),
            completed=frozenset(self._completed),
        )

    def is_completed(self, index: int) -> bool:
        if not 0 <= index < len(self._questions):
            return False
        return self._questions[index].id in self._completed

    def status(self, index: int) -> QuestionStatus:
        if index == self._active_index:
            return QuestionStatus.ACTIVE
        if self.is_completed(index):
            return QuestionStatus.COMPLETED
        return QuestionStatus.NOT_REACHED

    def advance(self) -> bool:
        """Move to the next question; return ``False`` when already terminal."""

        index = self._active_index
        if index is None or index >= len(self._questions) - 1:
            return False
        self._completed.add(self._questions[index].id)
        self._active_index = index + 1
        logger.debug("Advanced from question %d to %d", index, index + 1)
        return True

    def retreat(self) -> bool:
        """Move to the previous question without touching ``completed``."""

        index = self._active_index
        if index is None or index == 0:
            return False
        self._active_index = index - 1
        return True

    def jump_to(self, index: int) -> bool:
        """Activate ``index`` if it is completed or already active."""

        if index == self._active_index:
            return True
        if not self.is_completed(index):
            logger.debug("Ignoring jump to unreached question %d", index)
            return False
        self._active_index = index
        return True

    def reset(self) -> None:
        """Return to the first question and forget completed questions."""

        self._active_index = 0 if self._questions else None
        self._completed.clear()


__all__ = ["QuestionNavigator"]
