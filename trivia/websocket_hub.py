from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket

from trivia.core.events import SessionEvent

logger = logging.getLogger(__name__)


class SessionWebSocketHub:
    """In-process WebSocket fan-out of session events.

    Contract:
      - register a view with `connect(websocket)`.
      - `relay` is a GameSession listener; it schedules `broadcast` on the running loop.

    Payloads are `SessionEvent.to_message()` dicts.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)

    async def broadcast(self, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._conns)

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            logger.debug("Dropping %d dead websocket(s)", len(dead))
            async with self._lock:
                for ws in dead:
                    self._conns.discard(ws)

    def relay(self, event: SessionEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Session driven outside the server loop (scripts/tests); nobody to notify.
            return
        task = loop.create_task(self.broadcast(event.to_message()))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
