"""Runtime configuration for the profile questionnaire.

Values are read from Streamlit secrets first and environment variables
second (a local ``.env`` file is loaded on import). Timings are configured in
milliseconds and exposed in seconds, which is what the timer queue expects.
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass
from typing import Mapping

import streamlit as st
from dotenv import load_dotenv

from constants.flow_mode import QuestionLayout

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SYNC_DEBOUNCE_MS = 100
DEFAULT_AUTO_ADVANCE_DELAY_MS = 300
DEFAULT_LAYOUT = QuestionLayout.ONE_AT_A_TIME

_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")


@dataclass(slots=True, frozen=True)
class QuestionnaireSettings:
    """Runtime configuration values.

    Attributes:
        sync_debounce_ms: Quiet period before local answers are pushed to the
            shared profile.
        auto_advance_delay_ms: Delay between picking a single-choice option
            and moving on to the next question.
        layout: Default question layout for new runs.
        only_required: Ask only required fields when ``True``.
        debug_logs: Toggle verbose debug logging.
    """

    sync_debounce_ms: int = DEFAULT_SYNC_DEBOUNCE_MS
    auto_advance_delay_ms: int = DEFAULT_AUTO_ADVANCE_DELAY_MS
    layout: QuestionLayout = DEFAULT_LAYOUT
    only_required: bool = False
    debug_logs: bool = False

    @property
    def sync_debounce_seconds(self) -> float:
        return self.sync_debounce_ms / 1000

    @property
    def auto_advance_delay_seconds(self) -> float:
        return self.auto_advance_delay_ms / 1000


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _parse_non_negative_int(value: object | None, *, env_var: str, default: int) -> int:
    """Return a non-negative integer parsed from ``value`` or ``default``."""

    if value is None:
        return default
    if isinstance(value, bool):
        parsed = int(value)
    elif isinstance(value, (int, float)):
        parsed = int(value)
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return default
        try:
            parsed = int(float(candidate))
        except ValueError:
            warnings.warn(
                "%s is not a number; using default %s=%d" % (candidate, env_var, default),
                RuntimeWarning,
            )
            return default
    else:
        warnings.warn(
            "Unsupported %s value '%s'; using default %d." % (env_var, value, default),
            RuntimeWarning,
        )
        return default
    if parsed < 0:
        warnings.warn(
            "%s must not be negative (got %d); using default %d." % (env_var, parsed, default),
            RuntimeWarning,
        )
        return default
    return parsed


def _parse_layout(value: str | None) -> QuestionLayout:
    if value is None:
        return DEFAULT_LAYOUT
    candidate = value.strip().lower().replace("-", "_")
    try:
        return QuestionLayout(candidate)
    except ValueError:
        logger.warning("Unknown QUESTIONNAIRE_LAYOUT '%s'; using %s", value, DEFAULT_LAYOUT.value)
        return DEFAULT_LAYOUT


def _read_secrets() -> Mapping[str, object]:
    try:
        return dict(st.secrets)
    except FileNotFoundError:
        return {}
    except Exception as exc:  # pragma: no cover - secrets parsing depends on deployment
        logger.debug("Streamlit secrets unavailable: %s", exc)
        return {}


def load_settings(environ: Mapping[str, str] | None = None, *, secrets: Mapping[str, object] | None = None) -> QuestionnaireSettings:
    """Load settings from Streamlit secrets or environment variables."""

    env = os.environ if environ is None else environ
    secret_values = _read_secrets() if secrets is None else secrets

    def _get(key: str) -> str | None:
        value = secret_values.get(key)
        if value is not None:
            return str(value)
        return env.get(key)

    return QuestionnaireSettings(
        sync_debounce_ms=_parse_non_negative_int(
            _get("PROFILE_SYNC_DEBOUNCE_MS"),
            env_var="PROFILE_SYNC_DEBOUNCE_MS",
            default=DEFAULT_SYNC_DEBOUNCE_MS,
        ),
        auto_advance_delay_ms=_parse_non_negative_int(
            _get("AUTO_ADVANCE_DELAY_MS"),
            env_var="AUTO_ADVANCE_DELAY_MS",
            default=DEFAULT_AUTO_ADVANCE_DELAY_MS,
        ),
        layout=_parse_layout(_get("QUESTIONNAIRE_LAYOUT")),
        only_required=_is_truthy_flag(_get("ONLY_REQUIRED_QUESTIONS")),
        debug_logs=_is_truthy_flag(_get("DEBUG_LOGS")),
    )


__all__ = [
    "DEFAULT_AUTO_ADVANCE_DELAY_MS",
    "DEFAULT_LAYOUT",
    "DEFAULT_SYNC_DEBOUNCE_MS",
    "QuestionnaireSettings",
    "load_settings",
]
