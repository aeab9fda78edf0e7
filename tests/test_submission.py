from __future__ import annotations

import logging
from typing import Any, Mapping

import pytest
import streamlit as st

from constants.keys import StateKeys
from state.profile_store import ProfileStore
from wizard.submission import SessionStateSubmitter, SubmissionResult, submit_profile_sections


class _ScriptedSubmitter:
    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[str] = []

    def submit_section(self, section: str, values: Mapping[str, Any]) -> SubmissionResult:
        self.calls.append(section)
        if section in self.failing:
            return SubmissionResult(section=section, ok=False, message="backend rejected payload")
        return SubmissionResult(section=section, ok=True)


def _store() -> ProfileStore:
    store = ProfileStore({})
    store.merge_section("skin", {"skin_type": "oily"})
    store.merge_section("hair", {"hair_concerns": []})
    store.merge_section("makeup", {"preferred_look": "natural"})
    return store


def test_each_non_empty_section_is_submitted_once_in_order() -> None:
    submitter = _ScriptedSubmitter()

    results = submit_profile_sections(_store(), submitter, ["skin", "hair", "lifestyle", "makeup"])

    assert submitter.calls == ["skin", "makeup"]
    assert all(result.ok for result in results)


def test_failures_are_returned_and_logged_without_retry(caplog: pytest.LogCaptureFixture) -> None:
    submitter = _ScriptedSubmitter(failing={"skin"})

    with caplog.at_level(logging.WARNING, logger="wizard.submission"):
        results = submit_profile_sections(_store(), submitter, ["skin", "makeup"])

    assert submitter.calls == ["skin", "makeup"]
    assert results[0] == SubmissionResult(section="skin", ok=False, message="backend rejected payload")
    assert "backend rejected payload" in caplog.text


def test_submitter_exceptions_propagate() -> None:
    class _Broken:
        def submit_section(self, section: str, values: Mapping[str, Any]) -> SubmissionResult:
            raise ConnectionError("offline")

    with pytest.raises(ConnectionError):
        submit_profile_sections(_store(), _Broken(), ["skin"])


def test_session_state_submitter_records_sections() -> None:
    submitter = SessionStateSubmitter()

    results = submit_profile_sections(_store(), submitter, ["skin", "makeup"])

    assert [result.ok for result in results] == [True, True]
    assert st.session_state[StateKeys.SUBMITTED_PROFILE] == {
        "skin": {"skin_type": "oily"},
        "makeup": {"preferred_look": "natural"},
    }
    assert submitter.submitted["skin"] == {"skin_type": "oily"}
