"""
Tests for environment-driven settings.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from virtual_match.config import Settings, project_root
from virtual_match.services.scheduling import DEFAULT_BLOCK_SECONDS

ENV_VARS = (
    "VIRTUAL_MATCH_BLOCK_SECONDS",
    "VIRTUAL_MATCH_PLAYERS_PATH",
    "VIRTUAL_MATCH_FPS",
    "VIRTUAL_MATCH_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()
    assert settings.block_seconds == DEFAULT_BLOCK_SECONDS
    assert settings.players_path == project_root() / "data" / "players.json"
    assert settings.frames_per_second == 30.0
    assert settings.log_level == "INFO"


def test_bundled_pool_exists():
    assert Settings().players_path.exists()


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("VIRTUAL_MATCH_BLOCK_SECONDS", "60")
    monkeypatch.setenv("VIRTUAL_MATCH_PLAYERS_PATH", str(tmp_path / "pool.json"))
    monkeypatch.setenv("VIRTUAL_MATCH_FPS", "12.5")
    monkeypatch.setenv("VIRTUAL_MATCH_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.block_seconds == 60
    assert settings.players_path == Path(tmp_path / "pool.json")
    assert settings.frames_per_second == 12.5
    assert settings.log_level == "DEBUG"


def test_blank_values_fall_back(monkeypatch):
    monkeypatch.setenv("VIRTUAL_MATCH_BLOCK_SECONDS", "  ")
    monkeypatch.setenv("VIRTUAL_MATCH_LOG_LEVEL", "")
    settings = Settings.from_env()
    assert settings.block_seconds == DEFAULT_BLOCK_SECONDS
    assert settings.log_level == "INFO"


@pytest.mark.parametrize(
    "name,value",
    [
        ("VIRTUAL_MATCH_BLOCK_SECONDS", "ten"),
        ("VIRTUAL_MATCH_BLOCK_SECONDS", "0"),
        ("VIRTUAL_MATCH_BLOCK_SECONDS", "1.5"),
        ("VIRTUAL_MATCH_FPS", "fast"),
        ("VIRTUAL_MATCH_FPS", "-30"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        Settings.from_env()
