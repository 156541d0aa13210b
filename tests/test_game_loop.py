from __future__ import annotations

import asyncio

import pytest

from trivia.api.models import SessionPhase
from trivia.game_loop import run_session_clock
from trivia.session import GameSession


async def _wait_for(predicate, *, timeout: float = 2.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached before timeout")
        await asyncio.sleep(0.005)


@pytest.mark.asyncio
async def test_clock_drives_session_to_completion(make_config) -> None:
    session = GameSession()
    session.start(make_config(track_length=3, feedback_delay_seconds=0.01, speed=1000.0))

    stop = asyncio.Event()
    task = asyncio.create_task(run_session_clock(session=session, tick_seconds=0.005, stop=stop))
    try:
        # First tick serves the opening question.
        await _wait_for(lambda: session.phase == SessionPhase.awaiting_answer)
        session.submit_answer(session.state.current_question.correct_answer_index)
        await _wait_for(lambda: session.phase == SessionPhase.awaiting_answer)
        session.submit_answer(session.state.current_question.correct_answer_index)
        await _wait_for(lambda: session.phase == SessionPhase.complete)
    finally:
        stop.set()
        await asyncio.wait_for(task, timeout=1.0)

    assert session.state.players[0].score == 20
    assert session.history[-1].type == "GAME_COMPLETE"


@pytest.mark.asyncio
async def test_clock_idles_until_a_session_starts() -> None:
    session = GameSession()
    stop = asyncio.Event()
    task = asyncio.create_task(run_session_clock(session=session, tick_seconds=0.005, stop=stop))

    await asyncio.sleep(0.03)
    assert not session.started

    stop.set()
    await asyncio.wait_for(task, timeout=1.0)
    assert task.done()


@pytest.mark.asyncio
async def test_clock_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        await run_session_clock(session=GameSession(), tick_seconds=0)
