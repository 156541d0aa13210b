from __future__ import annotations

import asyncio
import logging

from trivia.session import GameSession

logger = logging.getLogger(__name__)


async def run_session_clock(
    *,
    session: GameSession,
    tick_seconds: float,
    stop: asyncio.Event | None = None,
) -> None:
    """Deliver tick signals to `session` until `stop` is set (or the task is cancelled).

    The generation is captured before each sleep, so a tick that straddles a
    restart() is dropped by the session instead of advancing the new game.
    """

    if tick_seconds <= 0:
        raise ValueError("tick_seconds must be > 0")

    loop = asyncio.get_running_loop()
    last = loop.time()
    while stop is None or not stop.is_set():
        generation = session.generation if session.started else None
        await asyncio.sleep(tick_seconds)
        now = loop.time()
        dt, last = now - last, now

        if generation is None or not session.started:
            continue
        session.tick(dt, generation=generation)

    logger.debug("Session clock stopped")
