"""One questionnaire run: a section's questions, answers, navigation and sync.

A run owns its :class:`~wizard.answers.AnswerStore` and
:class:`~wizard.navigation.QuestionNavigator` and discards both when it ends.
Only the shared profile store outlives it. The host drives time by calling
:meth:`QuestionnaireRun.tick`, which fires the debounced push and the
single-choice auto-advance once they are due.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from config import QuestionnaireSettings
from constants.flow_mode import QuestionLayout
from core.errors import RunClosedError
from core.profile_schema import PROFILE_SCHEMA, ProfileSchema
from core.validation import (
    ValidationResult,
    evaluate_answer,
    invalid_questions,
    is_answer_valid,
    is_section_valid,
    is_value_present,
)
from questions.generate import PresentationType, Question, generate_questions
from state.profile_store import ProfileRepository
from utils.logging_context import log_context
from utils.timers import ScheduledCall, TimerQueue
from wizard.answers import AnswerStore, AnswerValue
from wizard.navigation import NavigationState, QuestionNavigator
from wizard.sync import ProfileSynchronizer

logger = logging.getLogger(__name__)


class QuestionnaireRun:
    """Collect answers for one profile section.

    Creating a run generates the section's questions and pulls previously
    stored answers exactly once. Edits are pushed back to ``store`` after the
    configured debounce; :meth:`close` flushes whatever is still pending.
    """

    def __init__(
        self,
        section: str,
        *,
        store: ProfileRepository,
        schema: ProfileSchema = PROFILE_SCHEMA,
        only_required: bool = False,
        layout: QuestionLayout = QuestionLayout.ONE_AT_A_TIME,
        timers: TimerQueue | None = None,
        settings: QuestionnaireSettings | None = None,
    ) -> None:
        self._settings = settings or QuestionnaireSettings()
        self._section = str(section)
        self._layout = QuestionLayout(layout)
        self._timers = timers or TimerQueue()
        self._questions: tuple[Question, ...] = tuple(
            generate_questions(schema, section, only_required=only_required)
        )
        self._answers = AnswerStore(self._questions)
        self._navigator = QuestionNavigator(self._questions)
        self._synchronizer = ProfileSynchronizer(
            self._section,
            answers=self._answers,
            store=store,
            timers=self._timers,
            debounce_seconds=self._settings.sync_debounce_seconds,
        )
        self._auto_advance: ScheduledCall | None = None
        self._closed = False
        with log_context(section=self._section):
            self._synchronizer.pull()
            logger.info(
                "Started %s run for section '%s' with %d question(s)",
                self._layout.value,
                self._section,
                len(self._questions),
            )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def section(self) -> str:
        return self._section

    @property
    def layout(self) -> QuestionLayout:
        return self._layout

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def answers(self) -> dict[str, AnswerValue]:
        """Copy of the current answers keyed by question id."""

        return self._answers.as_dict()

    @property
    def navigation(self) -> NavigationState:
        return self._navigator.state

    @property
    def navigator(self) -> QuestionNavigator:
        return self._navigator

    @property
    def active_question(self) -> Question | None:
        return self._navigator.active_question

    @property
    def synchronizer(self) -> ProfileSynchronizer:
        return self._synchronizer

    @property
    def timers(self) -> TimerQueue:
        return self._timers

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_valid(self) -> bool:
        """``True`` when every question of the run holds a valid answer."""

        return is_section_valid(self._questions, self._answers.as_dict())

    @property
    def can_advance(self) -> bool:
        """Whether the "continue" affordance should be enabled."""

        if self._layout is QuestionLayout.ALL_AT_ONCE:
            return self.is_valid and not self._navigator.is_terminal
        question = self._navigator.active_question
        if question is None or self._navigator.is_terminal:
            return False
        return is_answer_valid(question, self._answers.get(question.id))

    @property
    def can_complete(self) -> bool:
        """Whether the terminal "complete" affordance should be enabled."""

        if self._layout is QuestionLayout.ALL_AT_ONCE:
            return self.is_valid
        return self._navigator.is_terminal and self.is_valid

    @property
    def progress_percentage(self) -> int:
        if self._layout is QuestionLayout.ALL_AT_ONCE:
            return 100 if self._navigator.is_terminal else self._answered_percentage()
        return self._navigator.state.progress_percentage

    @property
    def has_pending_auto_advance(self) -> bool:
        return self._auto_advance is not None and self._auto_advance.active

    def question(self, question_id: str) -> Question:
        return self._answers.question(question_id)

    def get_answer(self, question_id: str, default: Any = None) -> Any:
        self.question(question_id)
        return self._answers.get(question_id, default)

    def validation_result(self, question_id: str) -> ValidationResult:
        """Return the structured validation outcome for ``question_id``."""

        question = self._answers.question(question_id)
        return evaluate_answer(question, self._answers.get(question_id))

    def blocking_questions(self) -> list[Question]:
        return [question for question, _rule in invalid_questions(self._questions, self._answers.as_dict())]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def answer(self, question_id: str, value: object) -> AnswerValue | None:
        """Record ``value`` for ``question_id`` and return the stored form.

        In the one-at-a-time layout a valid single-choice answer on the active
        question schedules an automatic advance after the configured delay.
        """

        self._ensure_open()
        with log_context(section=self._section, question_id=question_id):
            stored = self._answers.set(question_id, value)
            self._maybe_schedule_auto_advance(question_id)
            return stored

    def toggle_option(self, question_id: str, option: str) -> list[str]:
        """Select or deselect ``option`` on a multi-choice question."""

        self._ensure_open()
        with log_context(section=self._section, question_id=question_id):
            return self._answers.toggle(question_id, option)

    def clear(self, question_id: str) -> None:
        self.answer(question_id, None)

    def advance(self) -> bool:
        """Move past the active question when its answer is valid.

        In the all-at-once layout the whole section is gated and a successful
        call moves straight to the terminal position.
        """

        self._ensure_open()
        if not self.can_advance:
            logger.debug("Advance blocked in section '%s'", self._section)
            return False
        self._cancel_auto_advance()
        if self._layout is QuestionLayout.ALL_AT_ONCE:
            moved = False
            while self._navigator.advance():
                moved = True
            return moved
        return self._navigator.advance()

    def retreat(self) -> bool:
        self._ensure_open()
        self._cancel_auto_advance()
        return self._navigator.retreat()

    def jump_to(self, index: int) -> bool:
        """Revisit a completed question; unreached indices are ignored."""

        self._ensure_open()
        if index == self._navigator.active_index:
            return True
        moved = self._navigator.jump_to(index)
        if moved:
            self._cancel_auto_advance()
        return moved

    def reset(self) -> None:
        """Return to the first question; answers are kept."""

        self._ensure_open()
        self._cancel_auto_advance()
        self._navigator.reset()

    def tick(self) -> int:
        """Fire due timers and return how many callbacks ran."""

        return self._timers.run_due()

    def flush(self) -> None:
        self._synchronizer.flush()

    def close(self) -> None:
        """End the run, pushing any answers still waiting for the debounce."""

        if self._closed:
            return
        self._cancel_auto_advance()
        with log_context(section=self._section):
            self._synchronizer.close()
            logger.info("Closed run for section '%s'", self._section)
        self._closed = True

    def __enter__(self) -> "QuestionnaireRun":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _ensure_open(self) -> None:
        if self._closed:
            raise RunClosedError(f"Questionnaire run for section '{self._section}' is closed")

    def _maybe_schedule_auto_advance(self, question_id: str) -> None:
        if self._layout is not QuestionLayout.ONE_AT_A_TIME:
            return
        question = self._navigator.active_question
        if question is None or question.id != question_id:
            return
        self._cancel_auto_advance()
        if question.presentation_type is not PresentationType.SINGLE_CHOICE:
            return
        selected = self._answers.get(question_id)
        if self._navigator.is_terminal or not is_value_present(selected) or not is_answer_valid(question, selected):
            return
        expected_index = self._navigator.active_index

        def _advance_if_still_active() -> None:
            self._auto_advance = None
            if self._closed or self._navigator.active_index != expected_index:
                logger.debug("Dropping stale auto-advance for question %s", question_id)
                return
            self._navigator.advance()

        self._auto_advance = self._timers.call_later(
            self._settings.auto_advance_delay_seconds,
            _advance_if_still_active,
        )

    def _cancel_auto_advance(self) -> None:
        if self._auto_advance is not None:
            self._auto_advance.cancel()
            self._auto_advance = None

    def _answered_percentage(self) -> int:
        if not self._questions:
            return 100
        answers: Mapping[str, object] = self._answers.as_dict()
        answered = sum(1 for question in self._questions if question.id in answers)
        return int(100 * answered / len(self._questions) + 0.5)


__all__ = ["QuestionnaireRun"]
