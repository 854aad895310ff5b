"""
Runtime settings, read from the environment.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from virtual_match.services.scheduling import DEFAULT_BLOCK_SECONDS


def project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    block_seconds: int = DEFAULT_BLOCK_SECONDS
    players_path: Path = project_root() / "data" / "players.json"
    frames_per_second: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        players_path = os.environ.get("VIRTUAL_MATCH_PLAYERS_PATH", "").strip()
        return cls(
            block_seconds=_int_env("VIRTUAL_MATCH_BLOCK_SECONDS", DEFAULT_BLOCK_SECONDS),
            players_path=Path(players_path) if players_path else cls.players_path,
            frames_per_second=_float_env("VIRTUAL_MATCH_FPS", 30.0),
            log_level=os.environ.get("VIRTUAL_MATCH_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
