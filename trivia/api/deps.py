from __future__ import annotations

from fastapi import Request

from trivia.api.models import Question
from trivia.session import GameSession
from trivia.settings import Settings


def get_session(request: Request) -> GameSession:
    return request.app.state.session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_default_questions(request: Request) -> list[Question]:
    return request.app.state.questions
