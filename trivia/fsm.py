from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from trivia.api.models import SessionPhase, SessionState
from trivia.errors import StateError


class TurnFSM(StateMachine):
    """FSM wrapper around SessionState.

    phases: awaiting question -> awaiting answer -> feedback -> moving -> (awaiting question | complete)

    Effects are applied by the turn engine; the FSM only guards transitions.
    """

    awaiting_question = State(
        SessionPhase.awaiting_question.value,
        value=SessionPhase.awaiting_question.value,
        initial=True,
    )
    awaiting_answer = State(SessionPhase.awaiting_answer.value, value=SessionPhase.awaiting_answer.value)
    feedback = State(SessionPhase.feedback.value, value=SessionPhase.feedback.value)
    moving = State(SessionPhase.moving.value, value=SessionPhase.moving.value)
    complete = State(SessionPhase.complete.value, value=SessionPhase.complete.value, final=True)

    question_served = awaiting_question.to(awaiting_answer)
    answer_submitted = awaiting_answer.to(feedback)
    feedback_elapsed = feedback.to(moving)
    next_turn = moving.to(awaiting_question)
    finish = moving.to(complete)

    def __init__(self, session: SessionState):
        self.session = session
        super().__init__(start_value=session.phase.value)

    @property
    def phase(self) -> SessionPhase:
        return SessionPhase(str(self.current_state.value))

    def fire(self, event: str) -> None:
        """Run one transition and mirror the new phase onto the session model."""

        try:
            self.send(event)
        except TransitionNotAllowed as e:
            raise StateError(f"'{event}' not allowed in phase '{self.phase.value}'") from e
        self.sync_phase_to_model()

    def sync_phase_to_model(self) -> None:
        self.session.phase = self.phase
