"""Streamlit rendering for questionnaire runs.

Widgets never write answers themselves: every ``on_change`` callback forwards
the widget value to :class:`~wizard.session.QuestionnaireRun` and mirrors the
normalized result back into the widget state.
"""

from __future__ import annotations

from typing import Any, Final

import streamlit as st

from constants.flow_mode import QuestionLayout
from constants.keys import UIKeys
from core.validation import ValidationRule
from questions.generate import PresentationType, Question
from wizard.navigation import QuestionStatus
from wizard.session import QuestionnaireRun

_DEFAULT_SLIDER_MIN: Final[float] = 1.0
_DEFAULT_SLIDER_MAX: Final[float] = 10.0

_RULE_HINTS: Final[dict[ValidationRule, str]] = {
    ValidationRule.MISSING: "This question needs an answer.",
    ValidationRule.TOO_FEW_ITEMS: "Please select at least {min_items} option(s).",
    ValidationRule.TOO_MANY_ITEMS: "Please select at most {max_items} option(s).",
    ValidationRule.NOT_A_NUMBER: "Please enter a number.",
    ValidationRule.BELOW_MINIMUM: "Please enter at least {min}.",
    ValidationRule.ABOVE_MAXIMUM: "Please enter at most {max}.",
}

_STATUS_ICONS: Final[dict[QuestionStatus, str]] = {
    QuestionStatus.COMPLETED: "✅",
    QuestionStatus.ACTIVE: "👉",
    QuestionStatus.NOT_REACHED: "⏳",
}


def answer_widget_key(question: Question) -> str:
    """Return the session-state key of the widget bound to ``question``."""

    return f"{UIKeys.ANSWER_PREFIX}{question.id}"


def _format_bound(value: float | None) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


def validation_hint(question: Question, rule: ValidationRule) -> str:
    """Return the user-facing message for a failed validation ``rule``."""

    return _RULE_HINTS[rule].format(
        min_items=question.min_items or 1,
        max_items=question.max_items or "",
        min=_format_bound(question.min),
        max=_format_bound(question.max),
    )


def _on_widget_change(run: QuestionnaireRun, question_id: str, key: str) -> None:
    value = st.session_state.get(key)
    if isinstance(value, str) and not value.strip():
        value = None
    stored = run.answer(question_id, value)
    if run.question(question_id).presentation_type is PresentationType.MULTI_CHOICE:
        # The sliding window may have evicted an older selection.
        st.session_state[key] = list(stored or [])


def _seed_widget_state(run: QuestionnaireRun, question: Question, key: str) -> Any:
    if key in st.session_state:
        return st.session_state[key]
    current = run.get_answer(question.id)
    match question.presentation_type:
        case PresentationType.MULTI_CHOICE:
            seeded: Any = list(current or [])
        case PresentationType.NUMERIC | PresentationType.SCALAR_RANGE:
            try:
                seeded = float(current) if current is not None else None
            except (TypeError, ValueError):
                seeded = None
        case PresentationType.FREE_TEXT:
            seeded = current or ""
        case _:
            seeded = current
    st.session_state[key] = seeded
    return seeded


def _option_labels(question: Question) -> dict[str, str]:
    return {option.value: option.label for option in question.options}


def render_question(run: QuestionnaireRun, question: Question, *, show_hint: bool = True) -> None:
    """Render the input widget for ``question``."""

    key = answer_widget_key(question)
    seeded = _seed_widget_state(run, question, key)
    label = f"{question.prompt}{' *' if question.required else ''}"
    callback_kwargs = {"on_change": _on_widget_change, "args": (run, question.id, key), "key": key}
    labels = _option_labels(question)

    match question.presentation_type:
        case PresentationType.SINGLE_CHOICE:
            options = list(question.option_values)
            if isinstance(seeded, str) and seeded and seeded not in options:
                options.append(seeded)
            st.radio(
                label,
                options,
                index=None,
                format_func=lambda value: labels.get(value, value),
                help=question.description,
                **callback_kwargs,
            )
        case PresentationType.MULTI_CHOICE:
            options = list(question.option_values)
            options.extend(value for value in seeded or [] if value not in options)
            st.multiselect(
                label,
                options,
                format_func=lambda value: labels.get(value, value),
                placeholder=question.placeholder or "Choose options",
                accept_new_options=question.custom_allowed,
                help=question.description,
                **callback_kwargs,
            )
        case PresentationType.FREE_TEXT:
            st.text_input(
                label,
                placeholder=question.placeholder,
                help=question.description,
                **callback_kwargs,
            )
        case PresentationType.NUMERIC:
            st.number_input(
                label,
                min_value=float(question.min) if question.min is not None else None,
                max_value=float(question.max) if question.max is not None else None,
                step=float(question.step) if question.step is not None else 1.0,
                value=None,
                placeholder=question.placeholder,
                help=question.description,
                **callback_kwargs,
            )
        case PresentationType.SCALAR_RANGE:
            lower = float(question.min) if question.min is not None else _DEFAULT_SLIDER_MIN
            upper = float(question.max) if question.max is not None else _DEFAULT_SLIDER_MAX
            if st.session_state.get(key) is None:
                st.session_state[key] = lower
            st.slider(
                label,
                min_value=lower,
                max_value=upper,
                step=float(question.step) if question.step is not None else 1.0,
                help=question.description,
                **callback_kwargs,
            )

    if question.unit:
        st.caption(question.unit)
    if show_hint and question.id in run.answers:
        result = run.validation_result(question.id)
        if not result.valid and result.failed_rule is not None:
            st.caption(f"⚠️ {validation_hint(question, result.failed_rule)}")


def render_question_trail(run: QuestionnaireRun) -> None:
    """Show answered questions as buttons so the user can go back and edit them."""

    navigator = run.navigator
    for index, question in enumerate(run.questions):
        status = navigator.status(index)
        if status is QuestionStatus.NOT_REACHED:
            continue
        st.button(
            f"{_STATUS_ICONS[status]} {question.label}",
            key=f"{run.section}.trail.{question.id}",
            disabled=status is QuestionStatus.ACTIVE,
            on_click=run.jump_to,
            args=(index,),
            use_container_width=True,
        )


def render_one_at_a_time(run: QuestionnaireRun) -> None:
    question = run.active_question
    if question is None:
        st.info("Nothing to ask in this section.")
        return
    st.progress(run.progress_percentage / 100, text=f"Question {run.navigation.active_index + 1} of {len(run.questions)}")
    with st.expander("Your answers", expanded=False):
        render_question_trail(run)
    render_question(run, question)

    col_back, col_next = st.columns(2)
    col_back.button(
        "← Back",
        key=f"{run.section}.retreat",
        disabled=run.navigation.active_index == 0,
        on_click=run.retreat,
        use_container_width=True,
    )
    if not run.navigation.is_terminal:
        col_next.button(
            "Continue →",
            key=f"{run.section}.advance",
            disabled=not run.can_advance,
            on_click=run.advance,
            type="primary",
            use_container_width=True,
        )


def render_all_at_once(run: QuestionnaireRun) -> None:
    st.progress(run.progress_percentage / 100)
    for question in run.questions:
        render_question(run, question)
        st.divider()


def render_run(run: QuestionnaireRun) -> None:
    """Render ``run`` in its configured layout."""

    if run.layout is QuestionLayout.ALL_AT_ONCE:
        render_all_at_once(run)
    else:
        render_one_at_a_time(run)


__all__ = [
    "answer_widget_key",
    "render_all_at_once",
    "render_one_at_a_time",
    "render_question",
    "render_question_trail",
    "render_run",
    "validation_hint",
]
