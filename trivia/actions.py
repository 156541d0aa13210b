from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from trivia.api.models import Question, SessionConfig, SessionStartRequest, SessionState
from trivia.core.events import SessionEvent
from trivia.errors import InvalidArgumentError
from trivia.session import GameSession
from trivia.settings import Settings

ActionName = Literal["start", "answer", "next_question", "feedback_elapsed", "restart"]
ACTION_NAMES: frozenset[str] = frozenset({"start", "answer", "next_question", "feedback_elapsed", "restart"})


@dataclass(frozen=True, slots=True)
class ActionResult:
    state: SessionState
    events: list[SessionEvent]


def build_config(*, request: SessionStartRequest, settings: Settings, default_questions: list[Question]) -> SessionConfig:
    """Fill unset request fields from settings and the bundled deck."""

    waypoints = tuple(tuple(w) for w in request.waypoints) if request.waypoints is not None else None
    track_length = request.track_length
    if track_length is None:
        track_length = len(waypoints) if waypoints is not None else settings.track_length

    return SessionConfig(
        track_length=track_length,
        players=request.players,
        questions=tuple(request.questions) if request.questions is not None else tuple(default_questions),
        speed=request.speed if request.speed is not None else settings.speed,
        feedback_delay_seconds=(
            request.feedback_delay_seconds
            if request.feedback_delay_seconds is not None
            else settings.feedback_delay_seconds
        ),
        base_points=request.base_points if request.base_points is not None else settings.base_points,
        waypoints=waypoints,
        seed=request.seed,
    )


def dispatch_action(
    *,
    session: GameSession,
    action: ActionName,
    payload: dict[str, Any],
    settings: Settings,
    default_questions: list[Question],
) -> ActionResult:
    """Entry point for the REST transport.

    Maps a named action onto the session's inbound calls and returns the new state
    plus the events the call produced. start/restart also serve the first question,
    since a remote view has no tick of its own to trigger it.
    """

    before = len(session.history) if session.started else 0

    if action == "start":
        request = SessionStartRequest.model_validate(payload)
        session.start(build_config(request=request, settings=settings, default_questions=default_questions))
        session.next_question()
        before = 0

    elif action == "answer":
        index = payload.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            raise InvalidArgumentError("'index' must be an integer")
        session.submit_answer(index)

    elif action == "next_question":
        session.next_question()

    elif action == "feedback_elapsed":
        session.feedback_elapsed()

    elif action == "restart":
        session.restart()
        session.next_question()
        before = 0

    else:
        raise ValueError(f"Unknown action: {action}")

    return ActionResult(state=session.snapshot(), events=list(session.history[before:]))
