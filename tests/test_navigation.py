from __future__ import annotations

from core.profile_schema import PROFILE_SCHEMA
from questions.generate import generate_questions
from wizard.navigation import NavigationState, QuestionNavigator, QuestionStatus


def _navigator(count: int = 4) -> QuestionNavigator:
    questions = generate_questions(PROFILE_SCHEMA, "skin")[:count]
    assert len(questions) == count
    return QuestionNavigator(questions)


def test_initial_state() -> None:
    navigator = _navigator()

    assert navigator.active_index == 0
    assert navigator.completed == frozenset()
    assert not navigator.is_terminal


def test_advance_is_monotonic_and_stops_at_last_question() -> None:
    navigator = _navigator(4)
    ids = [question.id for question in navigator.questions]

    for expected in range(1, 4):
        assert navigator.advance()
        assert navigator.active_index == expected
        assert ids[expected - 1] in navigator.completed
        assert ids[expected] not in navigator.completed

    assert navigator.is_terminal
    assert not navigator.advance()
    assert navigator.active_index == 3
    assert navigator.completed == frozenset(ids[:3])


def test_retreat_keeps_completed_questions() -> None:
    navigator = _navigator(3)
    navigator.advance()
    navigator.advance()

    assert navigator.retreat()
    assert navigator.active_index == 1
    assert navigator.is_completed(1)
    assert navigator.retreat()
    assert not navigator.retreat()
    assert navigator.active_index == 0


def test_jump_to_unreached_question_is_ignored() -> None:
    navigator = _navigator(4)

    assert not navigator.jump_to(2)
    assert navigator.active_index == 0
    assert not navigator.jump_to(99)
    assert navigator.active_index == 0


def test_jump_back_to_completed_question() -> None:
    navigator = _navigator(4)
    navigator.advance()
    navigator.advance()

    assert navigator.jump_to(0)
    assert navigator.active_index == 0
    assert navigator.jump_to(1)
    assert navigator.active_index == 1
    # The previously active question was never completed, so it stays out of reach.
    assert not navigator.jump_to(2)
    assert navigator.jump_to(1)


def test_status_per_index() -> None:
    navigator = _navigator(3)
    navigator.advance()

    assert navigator.status(0) is QuestionStatus.COMPLETED
    assert navigator.status(1) is QuestionStatus.ACTIVE
    assert navigator.status(2) is QuestionStatus.NOT_REACHED


def test_reset_clears_completed() -> None:
    navigator = _navigator(3)
    navigator.advance()
    navigator.advance()
    navigator.reset()

    assert navigator.active_index == 0
    assert navigator.completed == frozenset()


def test_empty_sequence_is_terminal() -> None:
    navigator = QuestionNavigator([])

    assert navigator.active_index is None
    assert navigator.active_question is None
    assert navigator.is_terminal
    assert not navigator.advance()
    assert not navigator.retreat()
    assert navigator.state.progress_percentage == 100


def test_progress_percentage_rounds_half_up() -> None:
    assert NavigationState(active_index=0, total=3).progress_percentage == 33
    assert NavigationState(active_index=1, total=3).progress_percentage == 67
    assert NavigationState(active_index=0, total=8).progress_percentage == 13
    assert NavigationState(active_index=3, total=4).progress_percentage == 100
