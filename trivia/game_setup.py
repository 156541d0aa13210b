from __future__ import annotations

from trivia.api.models import Coordinate, PlayerState


def build_initial_players(*, num_players: int, start: Coordinate) -> list[PlayerState]:
    """Create players p1..pN, all on the first waypoint."""

    if num_players < 1 or num_players > 2:
        raise ValueError("num_players must be 1 or 2")

    return [
        PlayerState(
            player_id=f"p{seat + 1}",
            seat=seat,
            display_name=f"Player {seat + 1}",
            token_position=tuple(start),
        )
        for seat in range(num_players)
    ]


def reset_players(*, players: list[PlayerState], start: Coordinate) -> None:
    """Put every player back on the first waypoint with a clean score.

    Mutates `players` in place.
    """

    for p in players:
        p.score = 0
        p.waypoint_index = 0
        p.questions_answered = 0
        p.token_position = tuple(start)
        p.finished = False
