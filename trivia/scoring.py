from __future__ import annotations

from trivia.errors import InvalidArgumentError

# 1-based per-player question ordinals that score double.
BONUS_COUNTS: frozenset[int] = frozenset({4, 8, 12, 18})


def is_bonus(questions_answered: int) -> bool:
    """True iff the 1-based per-player question count is a bonus ordinal."""

    if questions_answered < 0:
        raise InvalidArgumentError(f"questions_answered must be >= 0, got {questions_answered}")
    return questions_answered in BONUS_COUNTS


def award(base_points: int, is_bonus: bool) -> int:
    if base_points < 0:
        raise InvalidArgumentError(f"base_points must be >= 0, got {base_points}")
    return base_points * 2 if is_bonus else base_points
