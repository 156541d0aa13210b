from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True, slots=True)
class Settings:
    # Defaults for sessions started without an explicit value.
    track_length: int = 10
    speed: float = 5.0
    feedback_delay_seconds: float = 1.0
    base_points: int = 10

    # How often the session clock delivers tick signals.
    tick_seconds: float = 1 / 30

    log_level: str = "INFO"

    # None => <project root>/assets/questions.csv
    questions_path: Path | None = None
    strict_assets: bool = False


def settings_from_env() -> Settings:
    """Read TRIVIA_* environment variables (a `.env` file is loaded by the app entrypoint)."""

    defaults = Settings()
    questions_path = os.environ.get("TRIVIA_QUESTIONS_PATH")
    return Settings(
        track_length=int(os.environ.get("TRIVIA_TRACK_LENGTH", defaults.track_length)),
        speed=float(os.environ.get("TRIVIA_SPEED", defaults.speed)),
        feedback_delay_seconds=float(os.environ.get("TRIVIA_FEEDBACK_DELAY_SECONDS", defaults.feedback_delay_seconds)),
        base_points=int(os.environ.get("TRIVIA_BASE_POINTS", defaults.base_points)),
        tick_seconds=float(os.environ.get("TRIVIA_TICK_SECONDS", defaults.tick_seconds)),
        log_level=os.environ.get("TRIVIA_LOG_LEVEL", defaults.log_level).upper(),
        questions_path=Path(questions_path) if questions_path else None,
        strict_assets=_env_bool("TRIVIA_STRICT_ASSETS"),
    )
