from __future__ import annotations

import logging
import random
from datetime import UTC, datetime
from typing import Any, Callable
from uuid import uuid4

from trivia.api.models import AnswerResolution, SessionConfig, SessionPhase, SessionState
from trivia.core.events import EventListener, EventType, SessionEvent
from trivia.errors import StateError
from trivia.game_setup import build_initial_players, reset_players
from trivia.question_bank import QuestionBank
from trivia.turn_engine import TurnEngine

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


class GameSession:
    """Composition root for one trivia game.

    Owns the players, the shuffled deck and the turn engine. It is constructed
    explicitly and handed to whatever drives the view layer; there is no global
    "current session".

    Usage:
        session = GameSession()
        session.subscribe(view.on_event)
        session.start(SessionConfig(track_length=5, questions=deck))
        session.next_question()     # or let the first tick do it
        session.submit_answer(2)
        session.tick(dt)            # from the caller's animation/event loop

    Feedback and Moving are suspensions: they only progress on `tick()` /
    `feedback_elapsed()`. `restart()` bumps `generation`, so resumes captured before
    the restart (see `trivia.game_loop`) are ignored.
    """

    def __init__(self) -> None:
        self._config: SessionConfig | None = None
        self._state: SessionState | None = None
        self._bank: QuestionBank | None = None
        self._deck: QuestionBank | None = None
        self._engine: TurnEngine | None = None
        self._rng = random.Random()
        self._listeners: list[EventListener] = []
        self.history: list[SessionEvent] = []

    @property
    def started(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> SessionState:
        if self._state is None:
            raise StateError("Session not started")
        return self._state

    @property
    def config(self) -> SessionConfig:
        if self._config is None:
            raise StateError("Session not started")
        return self._config

    @property
    def deck(self) -> QuestionBank:
        if self._deck is None:
            raise StateError("Session not started")
        return self._deck

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def generation(self) -> int:
        return self.state.generation

    @property
    def _turns(self) -> TurnEngine:
        if self._engine is None:
            raise StateError("Session not started")
        return self._engine

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def snapshot(self) -> SessionState:
        return self.state.model_copy(deep=True)

    def start(self, config: SessionConfig) -> SessionState:
        """Begin a fresh session; the previous one (if any) is abandoned.

        Raises InvalidDataError for a malformed deck, leaving any existing session as it was.
        """

        bank = QuestionBank.load(config.questions)
        track = config.track()
        rng = random.Random(config.seed)

        # Keep generations monotonic so resumes from an abandoned session stay stale.
        generation = self._state.generation + 1 if self._state is not None else 0
        now = _now()
        state = SessionState(
            session_id=uuid4(),
            created_at=now,
            last_updated_at=now,
            seed=config.seed,
            generation=generation,
            players=build_initial_players(num_players=config.players, start=track[0]),
        )

        if self._engine is not None:
            self._engine.cancel()
        self._config = config
        self._bank = bank
        self._rng = rng
        self._deck = bank.shuffled_view(rng=rng)
        self._state = state
        self.history = []
        self._engine = TurnEngine(state=state, config=config, deck=self._deck, emit=self._emit)

        logger.info(
            "Session %s started: players=%d track_length=%d questions=%d",
            state.session_id,
            config.players,
            config.track_length,
            len(bank),
        )
        return state

    def next_question(self) -> None:
        """Serve the first question after start()/restart()."""

        self._turns.begin_turn()

    def submit_answer(self, index: int) -> AnswerResolution:
        try:
            return self._turns.submit_answer(index)
        except StateError as e:
            logger.warning("Rejected answer %r: %s", index, e)
            raise

    def tick(self, dt: float, *, generation: int | None = None) -> None:
        if generation is not None and generation != self.generation:
            logger.debug("Ignoring stale tick (generation %d, current %d)", generation, self.generation)
            return
        self._turns.advance(dt)

    def feedback_elapsed(self, *, generation: int | None = None) -> None:
        if generation is not None and generation != self.generation:
            logger.debug("Ignoring stale feedback timer (generation %d, current %d)", generation, self.generation)
            return
        self._turns.end_feedback()

    def restart(self) -> SessionState:
        """Reset to the equivalent of a fresh start() with the same config.

        Any pending feedback delay or move is abandoned first. The deck is reshuffled
        from the session's random stream, so its order may differ.
        """

        state = self.state
        config = self.config
        if self._bank is None:
            raise StateError("Session not started")

        self._turns.cancel()
        state.generation += 1

        track = config.track()
        reset_players(players=state.players, start=track[0])
        state.active_player_index = 0
        state.global_question_cursor = 0
        state.current_question = None
        state.current_is_bonus = False
        state.last_resolution = None
        state.winner_id = None
        state.is_tie = False
        state.phase = SessionPhase.awaiting_question
        state.last_updated_at = _now()

        self._deck = self._bank.shuffled_view(rng=self._rng)
        self.history = []
        self._engine = TurnEngine(state=state, config=config, deck=self._deck, emit=self._emit)

        logger.info("Session %s restarted (generation %d)", state.session_id, state.generation)
        return state

    def _emit(self, type: EventType, payload: dict[str, Any]) -> None:
        state = self.state
        event = SessionEvent.now(type=type, generation=state.generation, payload=payload)
        state.last_updated_at = event.ts
        self.history.append(event)

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # Listener failures are logged, never propagated into the turn engine.
                logger.exception("Event listener failed for %s", type)
