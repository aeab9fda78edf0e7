from __future__ import annotations

from itertools import permutations

import pytest

from core.errors import UnknownQuestionError
from core.profile_schema import build_schema
from core.validation import ValidationRule, evaluate_answer
from questions.generate import generate_questions
from wizard.answers import AnswersChanged, AnswerStore, apply_selection_window, selected_options


def _store() -> AnswerStore:
    schema = build_schema(
        {
            "skin": {
                "skin_type": {"kind": "single_select", "label": "Skin type", "options": ["dry", "oily"]},
                "concerns": {
                    "kind": "multi_select",
                    "label": "Concerns",
                    "options": ["A", "B", "C", "D"],
                    "max_items": 2,
                },
                "age": {"kind": "numeric", "label": "Age", "min": 13, "max": 100},
                "notes": {"kind": "free_text", "label": "Notes"},
            }
        }
    )
    return AnswerStore(generate_questions(schema, "skin"))


def test_sliding_window_keeps_most_recent_selections() -> None:
    for first, second, third in permutations(["A", "B", "C"]):
        answers = _store()
        answers.toggle("skin_concerns", first)
        answers.toggle("skin_concerns", second)
        stored = answers.toggle("skin_concerns", third)

        assert stored == [second, third]
        assert answers.get("skin_concerns") == [second, third]


def test_setting_too_many_items_trims_oldest() -> None:
    answers = _store()

    assert answers.set("skin_concerns", ["A", "B", "C"]) == ["B", "C"]


def test_toggle_deselects_and_deduplicates() -> None:
    answers = _store()
    answers.set("skin_concerns", ["A", "A", " B "])

    assert answers.get("skin_concerns") == ["A", "B"]
    assert answers.toggle("skin_concerns", "A") == ["B"]


def test_toggle_rejects_non_multi_choice() -> None:
    with pytest.raises(TypeError):
        _store().toggle("skin_skin_type", "dry")


def test_apply_selection_window_without_bound() -> None:
    assert apply_selection_window(["A", "B", "C"], None) == ["A", "B", "C"]


@pytest.mark.parametrize(("value", "expected"), [(3.0, "3"), (7.5, "7.5"), (42, "42"), (" 18 ", "18")])
def test_numeric_answers_are_stored_as_strings(value: object, expected: str) -> None:
    answers = _store()

    assert answers.set("skin_age", value) == expected


def test_single_choice_rejects_sequences() -> None:
    with pytest.raises(TypeError):
        _store().set("skin_skin_type", ["dry", "oily"])


def test_unknown_question_id() -> None:
    with pytest.raises(UnknownQuestionError):
        _store().set("skin_unknown", "x")


def test_listeners_see_changes_only() -> None:
    answers = _store()
    events: list[AnswersChanged] = []
    unsubscribe = answers.subscribe(events.append)

    answers.set("skin_skin_type", "dry")
    answers.set("skin_skin_type", "dry")
    answers.merge({"skin_notes": "hello", "skin_age": 30})
    unsubscribe()
    answers.set("skin_skin_type", "oily")

    assert events == [
        AnswersChanged(question_ids=("skin_skin_type",)),
        AnswersChanged(question_ids=("skin_notes", "skin_age")),
    ]


def test_seed_is_silent_and_never_overwrites() -> None:
    answers = _store()
    events: list[AnswersChanged] = []
    answers.subscribe(events.append)
    answers.set("skin_skin_type", "oily")
    events.clear()

    seeded = answers.seed({"skin_skin_type": "dry", "skin_notes": "from storage"})

    assert seeded == ["skin_notes"]
    assert answers.get("skin_skin_type") == "oily"
    assert answers.get("skin_notes") == "from storage"
    assert events == []


def test_seeded_selections_over_the_limit_fail_validation() -> None:
    schema = build_schema(
        {
            "hair": {
                "hair_concerns": {
                    "kind": "multi_select",
                    "label": "Hair concerns",
                    "options": ["frizz", "dryness", "breakage"],
                    "required": True,
                    "max_items": 2,
                }
            }
        }
    )
    answers = AnswerStore(generate_questions(schema, "hair"))

    answers.seed({"hair_hair_concerns": ["frizz", "dryness", "breakage", "frizz"]})

    question = answers.question("hair_hair_concerns")
    assert answers.get("hair_hair_concerns") == ["frizz", "dryness", "breakage"]
    result = evaluate_answer(question, answers.get("hair_hair_concerns"))
    assert result.failed_rule is ValidationRule.TOO_MANY_ITEMS

    assert answers.toggle("hair_hair_concerns", "breakage") == ["frizz", "dryness"]
    assert evaluate_answer(question, answers.get("hair_hair_concerns")).valid


def test_selected_options_keeps_first_occurrence() -> None:
    assert selected_options(["B", None, " A ", "", "B"]) == ["B", "A"]
    assert selected_options("A") == ["A"]


def test_selected_options_rejects_scalars() -> None:
    with pytest.raises(TypeError):
        selected_options(3)


def test_cleared_answers_report_none_by_field_name() -> None:
    answers = _store()
    answers.set("skin_skin_type", "dry")
    answers.set("skin_notes", "hello")
    answers.set("skin_notes", None)

    assert "skin_notes" not in answers
    assert answers.field_values() == {"notes": None, "skin_type": "dry"}


def test_returned_values_are_copies() -> None:
    answers = _store()
    answers.set("skin_concerns", ["A"])

    answers.get("skin_concerns").append("B")
    answers.as_dict()["skin_concerns"].append("C")

    assert answers.get("skin_concerns") == ["A"]
