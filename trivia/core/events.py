from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Literal

EventType = Literal[
    "QUESTION_READY",
    "ANSWER_RESOLVED",
    "TOKEN_MOVED",
    "GAME_COMPLETE",
]


@dataclass(frozen=True, slots=True)
class SessionEvent:
    type: EventType
    generation: int
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, generation: int, payload: dict[str, Any]) -> "SessionEvent":
        return SessionEvent(type=type, generation=generation, payload=payload, ts=datetime.now(timezone.utc))

    def to_message(self) -> dict[str, Any]:
        """JSON-serializable form for the WebSocket hub."""

        return {
            "type": self.type,
            "generation": self.generation,
            "ts": self.ts.isoformat(),
            **self.payload,
        }


EventListener = Callable[[SessionEvent], None]
