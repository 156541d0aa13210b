from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from dotenv import load_dotenv
from fastapi import FastAPI

from trivia.api.routes import router
from trivia.assets.registry import load_questions
from trivia.game_loop import run_session_clock
from trivia.session import GameSession
from trivia.settings import Settings, settings_from_env
from trivia.websocket_hub import SessionWebSocketHub

logger = logging.getLogger(__name__)


def create_app(*, settings: Settings | None = None, run_clock: bool = True) -> FastAPI:
    """Build the view-layer transport around one in-memory GameSession.

    With `run_clock` the app drives feedback delays and token moves from an asyncio
    task; tests switch it off and tick the session by hand.
    """

    settings = settings or settings_from_env()
    session = GameSession()
    hub = SessionWebSocketHub()
    session.subscribe(hub.relay)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        stop = asyncio.Event()
        task: asyncio.Task[None] | None = None
        if run_clock:
            task = asyncio.create_task(run_session_clock(session=session, tick_seconds=settings.tick_seconds, stop=stop))
        try:
            yield
        finally:
            stop.set()
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    app = FastAPI(title="trivia-track", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.session = session
    app.state.hub = hub
    app.state.questions = load_questions(path=settings.questions_path, strict=settings.strict_assets)
    app.include_router(router)

    @app.get("/info")
    async def info() -> dict[str, str]:
        return {"name": "trivia-track", "version": "0.1.0"}

    return app


load_dotenv(override=False)
_settings = settings_from_env()
# Configure logging
logging.basicConfig(level=getattr(logging, _settings.log_level, logging.INFO))

app = create_app(settings=_settings)
