from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from trivia.api.models import SessionPhase, SessionState
from trivia.errors import InvalidArgumentError, StateError


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """What a validator sees about the inbound call, besides the session state."""

    session_id: str
    action: str
    answer_index: int | None = None


class TurnValidator(ABC):
    """One check run before the turn engine mutates anything."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class PhaseValidator(TurnValidator):
    """The session must be in one of `allowed_phases`."""

    allowed_phases: frozenset[SessionPhase]

    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        if state.phase not in self.allowed_phases:
            allowed = ",".join(sorted(p.value for p in self.allowed_phases))
            raise StateError(f"Action '{ctx.action}' not allowed in phase '{state.phase.value}' (allowed: {allowed})")


@dataclass(frozen=True, slots=True)
class CompletedSessionValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        if state.phase == SessionPhase.complete:
            raise StateError("Session is complete")


@dataclass(frozen=True, slots=True)
class AnswerIndexValidator(TurnValidator):
    """The selected answer must be one of the current question's options."""

    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        question = state.current_question
        if question is None:
            raise StateError("No question is being asked")
        idx = ctx.answer_index
        if idx is None or not 0 <= idx < len(question.answers):
            raise InvalidArgumentError(f"Answer index {idx} outside 0..{len(question.answers) - 1}")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[TurnValidator, ...]

    def validate(self, *, ctx: ValidationContext, state: SessionState) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, state=state)


DEFAULT_ACTION_PIPELINES: dict[str, ValidatorPipeline] = {
    "submit_answer": ValidatorPipeline(
        validators=(
            CompletedSessionValidator(),
            PhaseValidator(allowed_phases=frozenset({SessionPhase.awaiting_answer})),
            AnswerIndexValidator(),
        )
    ),
    "feedback_elapsed": ValidatorPipeline(
        validators=(PhaseValidator(allowed_phases=frozenset({SessionPhase.feedback})),)
    ),
}


def pipeline_for_action(action: str) -> ValidatorPipeline:
    pipe = DEFAULT_ACTION_PIPELINES.get(action)
    if pipe is None:
        raise ValueError(f"Unknown action: {action}")
    return pipe
