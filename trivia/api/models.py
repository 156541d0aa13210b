from __future__ import annotations

import math
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

# A point in track space; every waypoint of a track shares one dimension.
Coordinate = tuple[float, ...]

MAX_ANSWERS = 4


class Difficulty(StrEnum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class Question(BaseModel):
    """One multiple-choice question from the deck.

    Answer count and correct index are not checked here;
    `QuestionBank.load` checks them so a malformed deck surfaces as `InvalidDataError`.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    answers: tuple[str, ...]
    correct_answer_index: int
    category: str = ""
    difficulty: Difficulty = Difficulty.medium


class SessionPhase(StrEnum):
    awaiting_question = "awaiting_question"
    awaiting_answer = "awaiting_answer"
    feedback = "feedback"
    moving = "moving"
    complete = "complete"


class SessionConfig(BaseModel):
    """Immutable per-session settings, supplied once to `GameSession.start`."""

    model_config = ConfigDict(frozen=True)

    track_length: int = Field(..., ge=2)
    players: int = Field(1, ge=1, le=2)
    questions: tuple[Question, ...] = ()
    speed: float = Field(5.0, gt=0, allow_inf_nan=False)
    feedback_delay_seconds: float = Field(1.0, ge=0, allow_inf_nan=False)
    base_points: int = Field(10, ge=0)

    # Explicit waypoint coordinates; defaults to unit spacing along the x axis.
    waypoints: tuple[Coordinate, ...] | None = None

    # For reproducible deck order.
    seed: int | None = None

    @model_validator(mode="after")
    def _check_waypoints(self) -> "SessionConfig":
        if self.waypoints is None:
            return self
        if len(self.waypoints) != self.track_length:
            raise ValueError(f"waypoints has {len(self.waypoints)} entries, expected track_length={self.track_length}")
        dims = {len(w) for w in self.waypoints}
        if len(dims) != 1 or 0 in dims:
            raise ValueError("waypoints must all share one non-zero dimension")
        if not all(math.isfinite(c) for w in self.waypoints for c in w):
            raise ValueError("waypoint coordinates must be finite")
        return self

    def track(self) -> tuple[Coordinate, ...]:
        if self.waypoints is not None:
            return self.waypoints
        return tuple((float(i), 0.0) for i in range(self.track_length))


class PlayerState(BaseModel):
    player_id: str
    seat: int

    # Human-friendly name for UI ("Player 1").
    display_name: str | None = None

    score: int = Field(0, ge=0)
    waypoint_index: int = Field(0, ge=0)

    # Per-player count; drives bonus eligibility.
    questions_answered: int = Field(0, ge=0)

    # Continuous position used while animating; snaps to the waypoint coordinate on arrival.
    token_position: Coordinate = (0.0, 0.0)

    # Reached the last waypoint; skipped by the turn rotation from then on.
    finished: bool = False


class AnswerResolution(BaseModel):
    player_id: str
    selected_index: int
    correct_index: int
    correct: bool
    is_bonus: bool
    points_earned: int
    new_score: int


class SessionState(BaseModel):
    session_id: UUID
    created_at: datetime
    last_updated_at: datetime

    # For reproducibility/debugging.
    seed: int | None = None

    # Bumped by restart(); resumes carrying an older value are ignored.
    generation: int = 0

    phase: SessionPhase = SessionPhase.awaiting_question

    players: list[PlayerState]
    active_player_index: int = 0

    # Shared across players, incremented on every question served.
    global_question_cursor: int = 0

    current_question: Question | None = None
    current_is_bonus: bool = False
    last_resolution: AnswerResolution | None = None

    # When complete.
    winner_id: str | None = None
    is_tie: bool = False

    @property
    def active_player(self) -> PlayerState:
        return self.players[self.active_player_index]


class SessionStartRequest(BaseModel):
    """Transport body for starting a session; unset fields fall back to settings."""

    track_length: int | None = Field(None, ge=2)
    players: int = Field(1, ge=1, le=2)
    questions: list[Question] | None = None
    speed: float | None = Field(None, gt=0, allow_inf_nan=False)
    feedback_delay_seconds: float | None = Field(None, ge=0, allow_inf_nan=False)
    base_points: int | None = Field(None, ge=0)
    waypoints: list[Coordinate] | None = None
    seed: int | None = None


class AnswerRequest(BaseModel):
    index: int = Field(..., ge=0, le=MAX_ANSWERS - 1)
