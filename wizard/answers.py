"""Per-run answer storage keyed by question id."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

from core.errors import UnknownQuestionError
from questions.generate import PresentationType, Question

AnswerValue = str | list[str]


@dataclass(frozen=True)
class AnswersChanged:
    """Notification emitted after user edits touched ``question_ids``."""

    question_ids: tuple[str, ...]


AnswerListener = Callable[[AnswersChanged], None]


def selected_options(value: object) -> list[str]:
    """Return the option values picked in ``value`` in selection order.

    A lone string counts as a single selection. Blank entries are skipped and
    repeats keep their first position.
    """

    if isinstance(value, str):
        value = [value]
    elif not isinstance(value, Iterable):
        raise TypeError(f"Expected a sequence of options, got {type(value).__name__}")
    selections: list[str] = []
    for item in value:
        option = "" if item is None else str(item).strip()
        if option and option not in selections:
            selections.append(option)
    return selections


def apply_selection_window(values: Sequence[str], max_items: int | None) -> list[str]:
    """Keep the ``max_items`` most recent selections, evicting the oldest."""

    selected = list(values)
    if max_items is not None and len(selected) > max_items:
        return selected[len(selected) - max_items :]
    return selected


def normalize_answer(question: Question, value: object, *, windowed: bool = True) -> AnswerValue | None:
    """Coerce ``value`` into the stored shape for ``question``.

    ``None`` means the answer should be cleared. With ``windowed=False``
    multi-choice selections are kept whole even past ``max_items``.
    """

    if value is None:
        return None
    match question.presentation_type:
        case PresentationType.MULTI_CHOICE:
            selections = selected_options(value)
            return apply_selection_window(selections, question.max_items) if windowed else selections
        case PresentationType.NUMERIC | PresentationType.SCALAR_RANGE:
            if isinstance(value, float) and value.is_integer():
                return str(int(value))
            return str(value).strip()
        case PresentationType.SINGLE_CHOICE | PresentationType.FREE_TEXT:
            if isinstance(value, (list, tuple)):
                raise TypeError(f"Question '{question.id}' expects a single value, got a sequence")
            return str(value)
    raise TypeError(f"Unsupported presentation type {question.presentation_type!r}")


class AnswerStore:
    """Working set of answers for one questionnaire run.

    Presentation code never mutates answers directly; every write goes through
    :meth:`set`, :meth:`toggle` or :meth:`merge` so listeners see each edit.
    :meth:`seed` loads previously saved values without notifying listeners.
    """

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: dict[str, Question] = {question.id: question for question in questions}
        self._values: dict[str, AnswerValue] = {}
        self._cleared: set[str] = set()
        self._listeners: list[AnswerListener] = []

    def question(self, question_id: str) -> Question:
        try:
            return self._questions[question_id]
        except KeyError:
            raise UnknownQuestionError(question_id) from None

    def questions(self) -> tuple[Question, ...]:
        return tuple(self._questions.values())

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, question_id: str, default: Any = None) -> Any:
        value = self._values.get(question_id)
        if value is None:
            return default
        return copy.copy(value)

    def as_dict(self) -> dict[str, AnswerValue]:
        """Return a copy of all answers keyed by question id."""

        return {key: copy.copy(value) for key, value in self._values.items()}

    def _write(self, question_id: str, value: object) -> bool:
        question = self.question(question_id)
        normalized = normalize_answer(question, value)
        if normalized is None:
            if question_id not in self._values:
                return False
            del self._values[question_id]
            self._cleared.add(question_id)
            return True
        if self._values.get(question_id) == normalized:
            return False
        self._values[question_id] = normalized
        self._cleared.discard(question_id)
        return True

    def set(self, question_id: str, value: object) -> AnswerValue | None:
        """Store ``value`` for ``question_id`` and return the stored form."""

        if self._write(question_id, value):
            self._emit((question_id,))
        return self.get(question_id)

    def toggle(self, question_id: str, option: str) -> list[str]:
        """Select or deselect ``option`` on a multi-choice question."""

        question = self.question(question_id)
        if question.presentation_type is not PresentationType.MULTI_CHOICE:
            raise TypeError(f"Question '{question_id}' is not a multi-choice question")
        current = list(self._values.get(question_id) or [])
        if option in current:
            current.remove(option)
        else:
            current.append(option)
        stored = self.set(question_id, current)
        return list(stored or [])

    def merge(self, values: Mapping[str, object]) -> None:
        """Apply several writes and emit a single change notification."""

        changed = [question_id for question_id, value in values.items() if self._write(question_id, value)]
        if changed:
            self._emit(tuple(changed))

    def seed(self, values: Mapping[str, object]) -> list[str]:
        """Load saved answers for unanswered questions without notifying listeners."""

        seeded: list[str] = []
        for question_id, value in values.items():
            if question_id in self._values:
                continue
            # pulled selections skip the sliding window
            normalized = normalize_answer(self.question(question_id), value, windowed=False)
            if normalized is None:
                continue
            self._values[question_id] = normalized
            seeded.append(question_id)
        return seeded

    def field_values(self) -> dict[str, AnswerValue | None]:
        """Return answers keyed by schema field name.

        Answers cleared during this run are reported as ``None`` so the shared
        profile drops them too.
        """

        payload: dict[str, AnswerValue | None] = {}
        for question_id in self._cleared:
            payload[self._questions[question_id].field_name] = None
        for question_id, value in self._values.items():
            payload[self._questions[question_id].field_name] = copy.copy(value)
        return payload

    def subscribe(self, listener: AnswerListener) -> Callable[[], None]:
        """Register ``listener`` for edit notifications and return an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, question_ids: tuple[str, ...]) -> None:
        event = AnswersChanged(question_ids=question_ids)
        for listener in list(self._listeners):
            listener(event)


__all__ = [
    "AnswerListener",
    "AnswerStore",
    "AnswerValue",
    "AnswersChanged",
    "apply_selection_window",
    "normalize_answer",
]
