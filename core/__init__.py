"""Core package for the profile schema, validation rules and completion metrics."""

from .errors import QuestionnaireError, RunClosedError, UnknownQuestionError, UnknownSectionError
from .profile_schema import PROFILE_SCHEMA, SECTION_ORDER, Section

__all__ = [
    "PROFILE_SCHEMA",
    "QuestionnaireError",
    "RunClosedError",
    "SECTION_ORDER",
    "Section",
    "UnknownQuestionError",
    "UnknownSectionError",
]
