from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

from trivia.api.models import AnswerResolution, Coordinate, Question, SessionConfig, SessionPhase, SessionState
from trivia.core.events import EventType
from trivia.errors import InvalidArgumentError, StateError
from trivia.fsm import TurnFSM
from trivia.movement import step
from trivia.question_bank import QuestionBank
from trivia.scoring import award, is_bonus
from trivia.turn_processing.turns import all_finished, determine_outcome, next_active_index
from trivia.turn_processing.validators import ValidationContext, pipeline_for_action

logger = logging.getLogger(__name__)

Emit = Callable[[EventType, dict[str, Any]], None]


@dataclass(slots=True)
class Suspension:
    """A pending feedback delay or token move, resumed by tick/timer signals.

    `generation` is the session generation it was created under.
    """

    phase: SessionPhase
    generation: int
    remaining: float = 0.0
    start: Coordinate = ()
    end: Coordinate = ()
    elapsed: float = 0.0


class TurnEngine:
    """Sequences one turn: ask -> answer -> feedback -> move -> hand off.

    The engine mutates the SessionState it was given and reports progress through
    `emit`; it never blocks. Feedback and Moving are suspensions advanced by
    `advance(dt)` (tick) or `end_feedback()` (timer callback).
    """

    def __init__(self, *, state: SessionState, config: SessionConfig, deck: QuestionBank, emit: Emit) -> None:
        self.state = state
        self.config = config
        self.deck = deck
        self.track = config.track()
        self.fsm = TurnFSM(state)
        self.suspension: Suspension | None = None
        self.cancelled = False
        self._emit = emit

    @property
    def phase(self) -> SessionPhase:
        return self.fsm.phase

    @property
    def last_waypoint(self) -> int:
        return len(self.track) - 1

    def _validate(self, action: str, *, answer_index: int | None = None) -> None:
        ctx = ValidationContext(session_id=str(self.state.session_id), action=action, answer_index=answer_index)
        pipeline_for_action(action).validate(ctx=ctx, state=self.state)

    def begin_turn(self) -> Question:
        """Serve the next deck question to the active player."""

        if self.phase != SessionPhase.awaiting_question:
            raise StateError(f"Cannot serve a question in phase '{self.phase.value}'")

        state = self.state
        player = state.active_player
        cursor = state.global_question_cursor
        question = self.deck.question_at(cursor)
        bonus = is_bonus(player.questions_answered + 1)

        state.global_question_cursor = cursor + 1
        state.current_question = question
        state.current_is_bonus = bonus
        self.fsm.fire("question_served")

        logger.debug("Question %d served to %s (bonus=%s)", cursor, player.player_id, bonus)
        self._emit(
            "QUESTION_READY",
            {
                "player_id": player.player_id,
                "question": question.model_dump(mode="json"),
                "options": list(question.answers),
                "is_bonus": bonus,
                "cursor": cursor,
            },
        )
        return question

    def submit_answer(self, index: int) -> AnswerResolution:
        self._validate("submit_answer", answer_index=index)

        state = self.state
        question = state.current_question
        if question is None:
            raise StateError("No question is being asked")
        player = state.active_player

        correct = index == question.correct_answer_index
        points = award(self.config.base_points, state.current_is_bonus) if correct else 0

        player.score += points
        player.questions_answered += 1
        resolution = AnswerResolution(
            player_id=player.player_id,
            selected_index=index,
            correct_index=question.correct_answer_index,
            correct=correct,
            is_bonus=state.current_is_bonus,
            points_earned=points,
            new_score=player.score,
        )
        state.last_resolution = resolution

        self.fsm.fire("answer_submitted")
        self.suspension = Suspension(
            phase=SessionPhase.feedback,
            generation=state.generation,
            remaining=self.config.feedback_delay_seconds,
        )

        logger.debug("%s answered %d (correct=%s, +%d)", player.player_id, index, correct, points)
        live = self._publish(
            "ANSWER_RESOLVED",
            {
                "player_id": player.player_id,
                "correct_index": question.correct_answer_index,
                "selected_index": index,
                "correct": correct,
                "points_earned": points,
                "new_score": player.score,
            },
        )

        if live and self.config.feedback_delay_seconds == 0:
            self._end_feedback()
        return resolution

    def advance(self, dt: float) -> None:
        """Tick signal: progress whatever suspension is pending.

        In AwaitingQuestion (session start/restart) a tick serves the first question.
        """

        if not math.isfinite(dt) or dt < 0:
            raise InvalidArgumentError(f"dt must be finite and >= 0, got {dt}")

        if self.phase == SessionPhase.awaiting_question:
            self.begin_turn()
            return

        s = self.suspension
        if s is None:
            return
        if s.generation != self.state.generation:
            logger.debug("Dropping suspension from generation %d", s.generation)
            self.suspension = None
            return

        if s.phase == SessionPhase.feedback:
            s.remaining -= dt
            if s.remaining <= 0:
                self._end_feedback()
        elif s.phase == SessionPhase.moving:
            s.elapsed += dt
            self._advance_move(s)

    def end_feedback(self) -> None:
        """Timer-elapsed signal for the feedback delay."""

        self._validate("feedback_elapsed")
        self._end_feedback()

    def cancel(self) -> None:
        """Retire this engine; a restart or new start has taken over the session."""

        self.suspension = None
        self.cancelled = True

    def _publish(self, type: EventType, payload: dict[str, Any]) -> bool:
        """Emit, then report whether this engine may keep mutating the session.

        Listeners run synchronously and may restart the session from inside `emit`.
        """

        self._emit(type, payload)
        return not self.cancelled

    def _end_feedback(self) -> None:
        state = self.state
        player = state.active_player

        # Finished players never get a turn, so this stays within the track.
        player.waypoint_index += 1
        target = self.track[player.waypoint_index]

        self.fsm.fire("feedback_elapsed")
        s = Suspension(
            phase=SessionPhase.moving,
            generation=state.generation,
            start=tuple(player.token_position),
            end=tuple(target),
        )
        self.suspension = s
        # Zero-length moves complete without waiting for a tick.
        self._advance_move(s)

    def _advance_move(self, s: Suspension) -> None:
        player = self.state.active_player
        coord, fraction = step(s.start, s.end, self.config.speed, s.elapsed)
        player.token_position = coord
        if coord == s.end or fraction >= 1:
            self._end_move(s)

    def _end_move(self, s: Suspension) -> None:
        state = self.state
        player = state.active_player
        self.suspension = None

        player.token_position = s.end
        if player.waypoint_index == self.last_waypoint:
            player.finished = True

        if not self._publish(
            "TOKEN_MOVED",
            {
                "player_id": player.player_id,
                "waypoint_index": player.waypoint_index,
                "coordinate": list(s.end),
            },
        ):
            return

        # Alternation is unconditional per resolved question.
        state.active_player_index = next_active_index(players=state.players, current=state.active_player_index)

        if all_finished(state.players):
            outcome = determine_outcome(state.players)
            state.winner_id = outcome.winner_id
            state.is_tie = outcome.is_tie
            state.current_question = None
            self.fsm.fire("finish")
            logger.info("Session %s complete: scores=%s winner=%s", state.session_id, outcome.scores, outcome.winner_id)
            self._emit(
                "GAME_COMPLETE",
                {
                    "scores": outcome.scores,
                    "winner_id": outcome.winner_id,
                    "is_tie": outcome.is_tie,
                },
            )
            return

        self.fsm.fire("next_turn")
        self.begin_turn()
