"""Hand the collected profile to the submission collaborator, section by section."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, MutableMapping, Protocol

import streamlit as st

from constants.keys import StateKeys
from core.validation import is_value_present
from state.profile_store import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome reported by the submitter for one section."""

    section: str
    ok: bool
    message: str | None = None


class ProfileSubmitter(Protocol):
    """External operation that persists one profile section."""

    def submit_section(self, section: str, values: Mapping[str, Any]) -> SubmissionResult: ...


class SessionStateSubmitter:
    """Submitter that records sections in session state instead of calling a backend."""

    def __init__(self, session_state: MutableMapping[str, Any] | None = None) -> None:
        self._session_state = session_state if session_state is not None else st.session_state

    @property
    def submitted(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(dict(self._session_state.get(StateKeys.SUBMITTED_PROFILE) or {}))

    def submit_section(self, section: str, values: Mapping[str, Any]) -> SubmissionResult:
        submitted = dict(self._session_state.get(StateKeys.SUBMITTED_PROFILE) or {})
        submitted[section] = copy.deepcopy(dict(values))
        self._session_state[StateKeys.SUBMITTED_PROFILE] = submitted
        return SubmissionResult(section=section, ok=True, message="Saved")


def _filled_values(values: Mapping[str, Any]) -> dict[str, Any]:
    return {field_name: value for field_name, value in values.items() if is_value_present(value)}


def submit_profile_sections(
    store: ProfileRepository,
    submitter: ProfileSubmitter,
    sections: Iterable[str],
) -> list[SubmissionResult]:
    """Submit every non-empty section once, in order.

    Failed submissions are neither retried nor interpreted; the results are
    returned as the submitter reported them. Exceptions raised by the
    submitter propagate to the caller.
    """

    results: list[SubmissionResult] = []
    for section in sections:
        values = _filled_values(store.get_section(str(section)))
        if not values:
            logger.debug("Skipping empty section '%s'", section)
            continue
        result = submitter.submit_section(str(section), values)
        if result.ok:
            logger.info("Submitted section '%s' (%d field(s))", section, len(values))
        else:
            logger.warning("Submission of section '%s' failed: %s", section, result.message or "no details")
        results.append(result)
    return results


__all__ = ["ProfileSubmitter", "SessionStateSubmitter", "SubmissionResult", "submit_profile_sections"]
