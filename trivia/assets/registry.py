from __future__ import annotations

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from trivia.api.models import MAX_ANSWERS, Difficulty, Question

logger = logging.getLogger(__name__)

QUESTION_CSV_HEADER = ["text", *(f"answer_{i}" for i in range(1, MAX_ANSWERS + 1)), "correct_index", "category", "difficulty"]


class AssetLoadError(RuntimeError):
    pass


def _read_csv_rows(path: Path) -> list[list[str]]:
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise AssetLoadError(f"Asset file not found: {path}") from e

    reader = csv.reader(raw.splitlines())
    rows = [[c.strip() for c in row if c is not None] for row in reader]
    return [row for row in rows if any(cell.strip() for cell in row)]


def load_question_csv(path: Path) -> list[Question]:
    """Parse a question deck.

    Trailing blank answer cells are dropped, so a row may carry 2-4 answers; a gap
    between two answers is rejected. Range checks on
    `correct_index` are left to `QuestionBank.load`.
    """

    rows = _read_csv_rows(path)
    if not rows:
        raise AssetLoadError(f"Empty question CSV: {path}")

    header = [c.casefold() for c in rows[0]]
    if header[: len(QUESTION_CSV_HEADER)] != QUESTION_CSV_HEADER:
        raise AssetLoadError(f"Unexpected header in {path}: {rows[0]}")

    out: list[Question] = []
    for lineno, row in enumerate(rows[1:], start=2):
        if len(row) < len(QUESTION_CSV_HEADER):
            raise AssetLoadError(f"{path}:{lineno}: expected {len(QUESTION_CSV_HEADER)} columns, got {len(row)}")
        text = row[0]
        if not text:
            continue
        cells = list(row[1 : MAX_ANSWERS + 1])
        while cells and not cells[-1]:
            cells.pop()
        if not all(cells):
            raise AssetLoadError(f"{path}:{lineno}: blank answer before a filled one")
        answers = tuple(cells)
        raw_index, category, difficulty = row[MAX_ANSWERS + 1 : MAX_ANSWERS + 4]
        try:
            out.append(
                Question(
                    text=text,
                    answers=answers,
                    correct_answer_index=int(raw_index),
                    category=category,
                    difficulty=difficulty.casefold() or Difficulty.medium,
                )
            )
        except (ValueError, ValidationError) as e:
            raise AssetLoadError(f"{path}:{lineno}: {e}") from e

    if not out:
        raise AssetLoadError(f"No questions in {path}")
    return out


def _fallback_questions() -> list[Question]:
    """Small built-in deck used when the CSV asset is missing."""

    return [
        Question(
            text="Which is the largest ocean?",
            answers=("Atlantic", "Indian", "Pacific", "Arctic"),
            correct_answer_index=2,
            category="Geography",
            difficulty=Difficulty.easy,
        ),
        Question(
            text="In which year did the Berlin Wall fall?",
            answers=("1987", "1989", "1990", "1991"),
            correct_answer_index=1,
            category="History",
            difficulty=Difficulty.medium,
        ),
        Question(
            text="What is the chemical symbol for gold?",
            answers=("Ag", "Au", "Pt", "Pb"),
            correct_answer_index=1,
            category="Science",
            difficulty=Difficulty.easy,
        ),
        Question(
            text="Who painted 'The Starry Night'?",
            answers=("Van Gogh", "Monet", "Picasso", "Dali"),
            correct_answer_index=0,
            category="Art",
            difficulty=Difficulty.medium,
        ),
        Question(
            text="Which element has the chemical symbol 'Fe'?",
            answers=("Iron", "Fluorine", "Fermium", "Phosphorus"),
            correct_answer_index=0,
            category="Science",
            difficulty=Difficulty.hard,
        ),
    ]


def default_questions_path() -> Path:
    # project root is two levels up from this file: trivia/assets/registry.py
    return Path(__file__).resolve().parents[2] / "assets" / "questions.csv"


def load_questions(*, path: Path | None = None, strict: bool = False) -> list[Question]:
    """Load the question deck asset.

    Falls back to a tiny built-in deck when the file is missing or unreadable,
    unless `strict` is set.
    """

    path = path or default_questions_path()
    try:
        questions = load_question_csv(path)
    except AssetLoadError:
        if strict:
            raise
        logger.warning("Question asset %s unavailable; using built-in deck", path)
        return _fallback_questions()

    logger.debug("Loaded %d questions from %s", len(questions), path)
    return questions
