"""Questionnaire runs, answer handling and the multi-section onboarding flow."""

from __future__ import annotations

from .onboarding import OnboardingFlow
from .session import QuestionnaireRun
from .submission import ProfileSubmitter, SessionStateSubmitter, SubmissionResult, submit_profile_sections

__all__ = [
    "OnboardingFlow",
    "ProfileSubmitter",
    "QuestionnaireRun",
    "SessionStateSubmitter",
    "SubmissionResult",
    "submit_profile_sections",
]
