"""Navigation helpers for questionnaire runs."""

from __future__ import annotations

from wizard.navigation.router import QuestionNavigator
from wizard.navigation.state import NavigationState, QuestionStatus

__all__ = [
    "NavigationState",
    "QuestionNavigator",
    "QuestionStatus",
]
