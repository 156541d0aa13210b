from __future__ import annotations

from collections.abc import Callable

import pytest

from trivia.api.models import Difficulty, Question, SessionConfig


def _question(n: int, *, correct: int = 0, answers: int = 4) -> Question:
    return Question(
        text=f"Question {n}?",
        answers=tuple(f"q{n}-a{i}" for i in range(answers)),
        correct_answer_index=correct,
        category="General",
        difficulty=Difficulty.easy,
    )


@pytest.fixture()
def make_question() -> Callable[..., Question]:
    return _question


@pytest.fixture()
def questions() -> list[Question]:
    """Four valid questions with varied correct indices."""

    return [_question(i, correct=i % 4) for i in range(4)]


@pytest.fixture()
def make_config(questions: list[Question]) -> Callable[..., SessionConfig]:
    def _make(**overrides: object) -> SessionConfig:
        values: dict[str, object] = {
            "track_length": 5,
            "players": 1,
            "questions": questions,
            "speed": 5.0,
            "feedback_delay_seconds": 1.0,
            "base_points": 10,
            "seed": 42,
        }
        values.update(overrides)
        return SessionConfig.model_validate(values)

    return _make
