from __future__ import annotations

from dataclasses import dataclass

from trivia.api.models import PlayerState


def next_active_index(*, players: list[PlayerState], current: int) -> int:
    """Return which seat index should act next.

    Policy: strict round-robin by list position after every resolved move, skipping
    players that already reached the end of the track. With a single player (or when
    everyone else is finished) the same index comes back.
    """

    if not players:
        raise ValueError("No players")

    n = len(players)
    for offset in range(1, n + 1):
        idx = (current + offset) % n
        if not players[idx].finished:
            return idx
    # Everyone finished; rotation still advances unconditionally.
    return (current + 1) % n


def all_finished(players: list[PlayerState]) -> bool:
    return bool(players) and all(p.finished for p in players)


@dataclass(frozen=True, slots=True)
class Outcome:
    scores: dict[str, int]
    winner_id: str | None
    is_tie: bool


def determine_outcome(players: list[PlayerState]) -> Outcome:
    """Strictly highest score wins; equal top scores are a tie."""

    if not players:
        raise ValueError("No players")

    scores = {p.player_id: p.score for p in players}
    top = max(scores.values())
    leaders = [pid for pid, s in scores.items() if s == top]
    if len(leaders) > 1:
        return Outcome(scores=scores, winner_id=None, is_tie=True)
    return Outcome(scores=scores, winner_id=leaders[0], is_tie=False)
