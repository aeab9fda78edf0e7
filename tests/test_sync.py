from __future__ import annotations

import pytest

from questions.generate import generate_questions
from tests.utils import RecordingStore, clock_generator, skin_schema
from utils.timers import TimerQueue
from wizard.answers import AnswerStore
from wizard.sync import ProfileSynchronizer

DEBOUNCE = 0.1


def _setup(store: RecordingStore | None = None):
    clock, advance = clock_generator()
    timers = TimerQueue(clock=clock)
    store = store or RecordingStore()
    questions = generate_questions(skin_schema(), "skin")
    answers = AnswerStore(questions)
    synchronizer = ProfileSynchronizer(
        "skin",
        answers=answers,
        store=store,
        timers=timers,
        debounce_seconds=DEBOUNCE,
    )
    return synchronizer, answers, store, timers, advance


def test_pull_copies_stored_values_and_leaves_missing_fields_absent() -> None:
    store = RecordingStore()
    store.merge_section("skin", {"skin_type": "dry"})
    store.merges.clear()
    synchronizer, answers, _, _, _ = _setup(store)

    synchronizer.pull()

    assert synchronizer.has_pulled
    assert answers.get("skin_skin_type") == "dry"
    assert "skin_primary_concerns" not in answers
    assert "skin_skin_goals" not in answers


def test_pull_happens_once_per_run() -> None:
    store = RecordingStore()
    store.merge_section("skin", {"skin_type": "dry"})
    synchronizer, answers, _, _, _ = _setup(store)
    synchronizer.pull()

    answers.set("skin_skin_type", "oily")
    store.merge_section("skin", {"skin_type": "normal", "skin_goals": "glow"})
    synchronizer.pull()

    assert answers.get("skin_skin_type") == "oily"
    assert "skin_skin_goals" not in answers


def test_pull_does_not_schedule_a_push() -> None:
    store = RecordingStore()
    store.merge_section("skin", {"skin_type": "dry"})
    store.merges.clear()
    synchronizer, _, _, timers, advance = _setup(store)

    synchronizer.pull()
    advance(1)
    timers.run_due()

    assert store.merges == []
    assert not synchronizer.has_pending_push


def test_store_changes_do_not_reach_answers() -> None:
    synchronizer, answers, store, timers, advance = _setup()
    synchronizer.pull()

    store.merge_section("skin", {"skin_type": "normal"})
    advance(1)
    timers.run_due()

    assert "skin_skin_type" not in answers
    assert synchronizer.push_count == 0


def test_rapid_edits_collapse_into_one_merge() -> None:
    synchronizer, answers, store, timers, advance = _setup()
    synchronizer.pull()

    answers.set("skin_skin_type", "oily")
    advance(0.05)
    timers.run_due()
    answers.set("skin_primary_concerns", ["acne"])
    advance(0.05)
    timers.run_due()
    answers.set("skin_skin_goals", "clear skin")
    advance(0.05)
    timers.run_due()
    assert store.merges == []

    advance(1)
    timers.run_due()

    assert store.merges == [
        ("skin", {"skin_type": "oily", "primary_concerns": ["acne"], "skin_goals": "clear skin"}),
    ]
    assert synchronizer.push_count == 1
    assert not synchronizer.has_pending_push


def test_push_merges_only_its_own_section() -> None:
    store = RecordingStore()
    store.merge_section("hair", {"hair_type": "curly"})
    store.merge_section("skin", {"skin_type": "dry", "legacy_field": "kept"})
    synchronizer, answers, _, timers, advance = _setup(store)
    synchronizer.pull()

    answers.set("skin_skin_type", "oily")
    advance(1)
    timers.run_due()

    assert store.get_section("hair") == {"hair_type": "curly"}
    assert store.get_section("skin") == {"skin_type": "oily", "legacy_field": "kept"}


def test_cleared_answer_is_removed_from_store() -> None:
    store = RecordingStore()
    store.merge_section("skin", {"skin_type": "dry", "skin_goals": "glow"})
    synchronizer, answers, _, timers, advance = _setup(store)
    synchronizer.pull()

    answers.set("skin_skin_goals", None)
    advance(1)
    timers.run_due()

    assert store.get_section("skin") == {"skin_type": "dry"}


def test_close_flushes_pending_edit() -> None:
    synchronizer, answers, store, timers, advance = _setup()
    synchronizer.pull()
    answers.set("skin_skin_type", "oily")

    synchronizer.close()

    assert store.merges == [("skin", {"skin_type": "oily"})]
    advance(1)
    timers.run_due()
    assert len(store.merges) == 1


def test_close_without_edits_does_not_push() -> None:
    synchronizer, _, store, _, _ = _setup()
    synchronizer.pull()

    synchronizer.close()

    assert store.merges == []


def test_edits_after_close_are_ignored() -> None:
    synchronizer, answers, store, timers, advance = _setup()
    synchronizer.pull()
    synchronizer.close()

    answers.set("skin_skin_type", "oily")
    advance(1)
    timers.run_due()

    assert store.merges == []


def test_flush_logs_reason(caplog: pytest.LogCaptureFixture) -> None:
    synchronizer, answers, store, _, _ = _setup()
    synchronizer.pull()
    answers.set("skin_skin_type", "oily")

    with caplog.at_level("INFO", logger="wizard.sync"):
        synchronizer.flush(reason="section change")

    assert "section change" in caplog.text
    assert len(store.merges) == 1
