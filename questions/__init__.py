"""Question generation for profile questionnaires."""

from .generate import PresentationType, Question, generate_questions, question_id

__all__ = ["PresentationType", "Question", "generate_questions", "question_id"]
