"""Custom exception types for the questionnaire engine."""

from __future__ import annotations

from typing import Iterable


class QuestionnaireError(Exception):
    """Base exception for questionnaire related issues."""


class UnknownSectionError(QuestionnaireError, KeyError):
    """Raised when a schema lookup targets a section that does not exist."""

    def __init__(self, section: str, known_sections: Iterable[str] = ()) -> None:
        self.section = section
        self.known_sections = tuple(known_sections)
        message = f"Unknown profile section '{section}'"
        if self.known_sections:
            message = f"{message} (known: {', '.join(self.known_sections)})"
        super().__init__(message)

    def __str__(self) -> str:
        # ``KeyError`` would otherwise render the message in quotes.
        return str(self.args[0])


class UnknownQuestionError(QuestionnaireError, KeyError):
    """Raised when an answer targets a question id outside the current run."""

    def __init__(self, question_id: str) -> None:
        self.question_id = question_id
        super().__init__(f"Unknown question id '{question_id}'")

    def __str__(self) -> str:
        return str(self.args[0])


class RunClosedError(QuestionnaireError):
    """Raised when a closed questionnaire run receives further input."""
