"""
Terminal runner: replays a block on a simulated clock and prints the score.
"""
from __future__ import annotations

import json

import pytest

from virtual_match.config import Settings
from virtual_match.run_virtual_match import SimulatedClock, main, run

BLOCK = 2_900_000


@pytest.fixture
def pool_path(tmp_path):
    path = tmp_path / "players.json"
    path.write_text(json.dumps({"players": [
        {"name": "P0", "rating": 1612},
        {"name": "P1", "rating": 1548},
        {"name": "P2", "rating": 1503},
        {"name": "P3", "rating": 1477},
        {"name": "P4", "rating": 1431},
        {"name": "P5", "rating": 1392},
    ]}))
    return path


def test_simulated_clock():
    clock = SimulatedClock(100.0)
    clock.sleep(2.5)
    assert clock() == 102.5


def test_replay_block(pool_path, capsys):
    timeline = run(players_path=pool_path, block_id=BLOCK, settings=Settings(frames_per_second=5))
    out = capsys.readouterr().out
    assert "P4 (1431)  vs  P2 (1503)" in out
    assert "MATCH RESULT" in out
    # one line per point, printed once each break starts
    assert out.count(" wins   Score: ") == timeline.point_count - 1
    sa, sb = timeline.final_score
    assert f"{sa}-{sb}" in out
    assert "Next match (block 2900001): P4 (1431) vs P3 (1477)" in out


def test_main_exits_on_small_pool(tmp_path, monkeypatch):
    path = tmp_path / "players.json"
    path.write_text(json.dumps({"players": [{"name": "Solo", "rating": 1500}]}))
    monkeypatch.setattr("sys.argv", ["virtual-match", "--players", str(path), "--fast"])
    with pytest.raises(SystemExit, match="at least 2 distinct players"):
        main()
