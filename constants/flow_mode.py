from __future__ import annotations

from enum import StrEnum


class QuestionLayout(StrEnum):
    ONE_AT_A_TIME = "one_at_a_time"
    ALL_AT_ONCE = "all_at_once"
