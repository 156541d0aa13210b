from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from trivia.actions import ACTION_NAMES, ActionName, dispatch_action
from trivia.api.deps import get_default_questions, get_session, get_settings
from trivia.api.models import AnswerRequest, Question, SessionStartRequest, SessionState
from trivia.errors import StateError
from trivia.session import GameSession
from trivia.settings import Settings

router = APIRouter()


def _run(
    *,
    session: GameSession,
    action: ActionName,
    payload: dict[str, Any],
    settings: Settings,
    questions: list[Question],
) -> SessionState:
    try:
        result = dispatch_action(
            session=session,
            action=action,
            payload=payload,
            settings=settings,
            default_questions=questions,
        )
    except StateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        # InvalidDataError / InvalidArgumentError / pydantic ValidationError.
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return result.state


@router.websocket("/ws/session")
async def session_events_ws(websocket: WebSocket) -> None:
    hub = websocket.app.state.hub
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/session", response_model=SessionState, status_code=status.HTTP_201_CREATED)
async def start_session_route(
    payload: SessionStartRequest,
    session: GameSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
    questions: list[Question] = Depends(get_default_questions),
) -> SessionState:
    return _run(
        session=session,
        action="start",
        payload=payload.model_dump(exclude_unset=True),
        settings=settings,
        questions=questions,
    )


@router.get("/session", response_model=SessionState)
async def get_session_route(session: GameSession = Depends(get_session)) -> SessionState:
    if not session.started:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not started")
    return session.snapshot()


@router.post("/session/answer", response_model=SessionState)
async def answer_route(
    payload: AnswerRequest,
    session: GameSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
    questions: list[Question] = Depends(get_default_questions),
) -> SessionState:
    if not session.started:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not started")
    return _run(session=session, action="answer", payload={"index": payload.index}, settings=settings, questions=questions)


@router.post("/session/restart", response_model=SessionState)
async def restart_route(
    session: GameSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
    questions: list[Question] = Depends(get_default_questions),
) -> SessionState:
    if not session.started:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not started")
    return _run(session=session, action="restart", payload={}, settings=settings, questions=questions)


@router.post("/session/actions/{action}", response_model=SessionState)
async def generic_action_route(
    action: str,
    body: dict[str, Any],
    session: GameSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
    questions: list[Question] = Depends(get_default_questions),
) -> SessionState:
    if action not in ACTION_NAMES:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Unknown action: {action}")
    if action != "start" and not session.started:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not started")
    act: ActionName = action  # type: ignore[assignment]
    return _run(session=session, action=act, payload=body, settings=settings, questions=questions)
