from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from trivia.api.models import MAX_ANSWERS, Question
from trivia.errors import InvalidArgumentError, InvalidDataError

logger = logging.getLogger(__name__)


def validate_question(question: Question, *, position: int) -> None:
    n = len(question.answers)
    if n < 2 or n > MAX_ANSWERS:
        raise InvalidDataError(f"Question #{position} has {n} answers (expected 2..{MAX_ANSWERS}): {question.text!r}")
    if not 0 <= question.correct_answer_index < n:
        raise InvalidDataError(
            f"Question #{position} has correct_answer_index={question.correct_answer_index}"
            f" outside 0..{n - 1}: {question.text!r}"
        )


class QuestionBank:
    """Ordered question deck with cyclic lookup.

    A bank is immutable once loaded; `shuffled_view` returns a new bank holding a
    permutation of the same questions, which is what a session plays from.
    """

    __slots__ = ("_questions",)

    def __init__(self, questions: tuple[Question, ...]) -> None:
        self._questions = questions

    @classmethod
    def load(cls, questions: Iterable[Question]) -> "QuestionBank":
        deck = tuple(questions)
        if not deck:
            raise InvalidDataError("Question deck is empty")
        for pos, q in enumerate(deck):
            validate_question(q, position=pos)
        logger.debug("Loaded %d questions", len(deck))
        return cls(deck)

    def __len__(self) -> int:
        return len(self._questions)

    def shuffled_view(self, seed: int | None = None, *, rng: random.Random | None = None) -> "QuestionBank":
        # random.shuffle is a Fisher-Yates shuffle: every permutation equally likely.
        if rng is None:
            rng = random.Random(seed)
        deck = list(self._questions)
        rng.shuffle(deck)
        return QuestionBank(tuple(deck))

    def question_at(self, cursor: int) -> Question:
        """Return the question at `cursor mod len`, so a session can outlast the deck."""

        if cursor < 0:
            raise InvalidArgumentError(f"cursor must be >= 0, got {cursor}")
        return self._questions[cursor % len(self._questions)]
