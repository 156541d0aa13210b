"""Token interpolation along one track segment.

Stateless: callers hold the start/end coordinates and the elapsed time and apply the
returned position themselves.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from trivia.api.models import Coordinate
from trivia.errors import DivisionByZeroError, InvalidArgumentError


def _check_point(name: str, point: Sequence[float]) -> None:
    if not point:
        raise InvalidArgumentError(f"{name} must have at least one dimension")
    if not all(math.isfinite(c) for c in point):
        raise InvalidArgumentError(f"{name} has non-finite coordinates: {tuple(point)}")


def _check_scalar(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise InvalidArgumentError(f"{name} must be finite and >= 0, got {value}")


def distance(start: Sequence[float], end: Sequence[float]) -> float:
    if len(start) != len(end):
        raise InvalidArgumentError(f"dimension mismatch: {len(start)} vs {len(end)}")
    return math.dist(start, end)


def lerp(start: Sequence[float], end: Sequence[float], t: float) -> Coordinate:
    return tuple(a + (b - a) * t for a, b in zip(start, end))


def fraction_of_journey(total: float, travelled: float) -> float:
    if total == 0:
        raise DivisionByZeroError("fraction of a zero-length journey")
    return travelled / total


def step(
    start: Sequence[float],
    end: Sequence[float],
    speed: float,
    elapsed: float,
) -> tuple[Coordinate, float]:
    """Position after travelling `elapsed * speed` from `start` towards `end`.

    Returns `(coordinate, fraction)`. Once `fraction >= 1` the coordinate is exactly
    `end`. A zero-length move completes immediately.
    """

    _check_point("start", start)
    _check_point("end", end)
    _check_scalar("speed", speed)
    _check_scalar("elapsed", elapsed)

    total = distance(start, end)
    if total == 0:
        return tuple(end), 1.0

    fraction = fraction_of_journey(total, elapsed * speed)
    if fraction >= 1:
        return tuple(end), fraction
    return lerp(start, end, fraction), fraction
