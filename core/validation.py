"""Answer validation rules for generated questions.

The navigation gate only consumes the boolean from :func:`is_answer_valid`.
:func:`evaluate_answer` additionally names the first rule that failed so the
presentation layer can phrase a hint without re-implementing the rules.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping, Sequence

from questions.generate import PresentationType, Question


class ValidationRule(StrEnum):
    """Rules that can reject an answer, in evaluation order."""

    MISSING = "missing"
    TOO_FEW_ITEMS = "too_few_items"
    TOO_MANY_ITEMS = "too_many_items"
    NOT_A_NUMBER = "not_a_number"
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one answer."""

    valid: bool
    failed_rule: ValidationRule | None = None

    def __bool__(self) -> bool:
        return self.valid


VALID = ValidationResult(valid=True)


def is_value_present(value: object | None) -> bool:
    """Return ``True`` when ``value`` should count as answered.

    Blank strings and empty collections are treated as absent; numbers and
    booleans always count as present.
    """

    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0
    if isinstance(value, Mapping):
        return len(value) > 0
    return True


def parse_number(value: object) -> float | None:
    """Return ``value`` as a finite float or ``None`` when it is not a number."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        try:
            parsed = float(candidate)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return parsed


def _item_count(value: object) -> int:
    if isinstance(value, str):
        return 1
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value)
    return 1


def evaluate_answer(question: Question, answer: object | None) -> ValidationResult:
    """Validate ``answer`` against the constraints copied onto ``question``."""

    if not question.required:
        return VALID
    if not is_value_present(answer):
        return ValidationResult(False, ValidationRule.MISSING)

    match question.presentation_type:
        case PresentationType.MULTI_CHOICE:
            count = _item_count(answer)
            if question.min_items is not None and count < question.min_items:
                return ValidationResult(False, ValidationRule.TOO_FEW_ITEMS)
            # Writes trim to ``max_items``; only seeded values can exceed it.
            if question.max_items is not None and count > question.max_items:
                return ValidationResult(False, ValidationRule.TOO_MANY_ITEMS)
        case PresentationType.NUMERIC | PresentationType.SCALAR_RANGE:
            number = parse_number(answer)
            if number is None:
                return ValidationResult(False, ValidationRule.NOT_A_NUMBER)
            if question.min is not None and number < question.min:
                return ValidationResult(False, ValidationRule.BELOW_MINIMUM)
            if question.max is not None and number > question.max:
                return ValidationResult(False, ValidationRule.ABOVE_MAXIMUM)
        case PresentationType.FREE_TEXT | PresentationType.SINGLE_CHOICE:
            pass
    return VALID


def is_answer_valid(question: Question, answer: object | None) -> bool:
    """Return ``True`` when ``answer`` does not block advancing past ``question``."""

    return evaluate_answer(question, answer).valid


def is_section_valid(questions: Sequence[Question], answers: Mapping[str, object]) -> bool:
    """Return ``True`` when every question in ``questions`` has a valid answer."""

    return all(is_answer_valid(question, answers.get(question.id)) for question in questions)


def invalid_questions(questions: Sequence[Question], answers: Mapping[str, object]) -> list[tuple[Question, ValidationRule]]:
    """Return the questions that block the section together with their failing rule."""

    failures: list[tuple[Question, ValidationRule]] = []
    for question in questions:
        result = evaluate_answer(question, answers.get(question.id))
        if not result.valid and result.failed_rule is not None:
            failures.append((question, result.failed_rule))
    return failures


__all__ = [
    "ValidationResult",
    "ValidationRule",
    "evaluate_answer",
    "invalid_questions",
    "is_answer_valid",
    "is_section_valid",
    "is_value_present",
    "parse_number",
]
