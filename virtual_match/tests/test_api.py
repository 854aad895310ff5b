"""
API integration tests.
Uses TestClient to avoid starting a server; the scheduler dependency is
overridden with a fixed pool and clock.
Requires: pip install httpx (for TestClient)
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

try:
    from fastapi.testclient import TestClient
    HAS_HTTPX = True
except (ImportError, RuntimeError):
    HAS_HTTPX = False

# Ensure project root on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

pytestmark = pytest.mark.skipif(not HAS_HTTPX, reason="httpx required for TestClient")

from virtual_match.api import NOT_ENOUGH_PLAYERS, app, get_scheduler
from virtual_match.services.player_pool import JsonPlayerPool, StaticPlayerPool
from virtual_match.services.scheduling import DEFAULT_BLOCK_SECONDS, TimeBlockScheduler
from virtual_match.simulation.schemas import Player

POOL = [
    Player("P0", 1612),
    Player("P1", 1548),
    Player("P2", 1503),
    Player("P3", 1477),
    Player("P4", 1431),
    Player("P5", 1392),
]
BLOCK = 2_900_000
BLOCK_START = BLOCK * DEFAULT_BLOCK_SECONDS


def make_client(pool_provider, now: float = BLOCK_START + 1.5) -> TestClient:
    scheduler = TimeBlockScheduler(pool_provider, clock=lambda: now)
    app.dependency_overrides[get_scheduler] = lambda: scheduler
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return make_client(StaticPlayerPool(POOL))


def test_get_players(client):
    resp = client.get("/players")
    assert resp.status_code == 200
    assert resp.json()["players"][0] == {"name": "P0", "rating": 1612}
    assert len(resp.json()["players"]) == 6


def test_current_match(client):
    resp = client.get("/virtual-match/current")
    assert resp.status_code == 200
    data = resp.json()
    assert data["block_id"] == BLOCK
    assert data["seed"] == BLOCK
    assert data["player_a"] == {"name": "P4", "rating": 1431}
    assert data["player_b"] == {"name": "P2", "rating": 1503}
    assert data["elapsed_seconds"] == pytest.approx(1.5)
    assert data["seconds_until_next_match"] == pytest.approx(DEFAULT_BLOCK_SECONDS - 1.5)
    assert data["state"]["status"] == "PLAYING"
    assert data["state"]["point_number"] == 1
    assert data["state"]["current_score"] == [0, 0]
    assert data["next_match"]["block_id"] == BLOCK + 1
    assert data["next_match"]["player_a"] == {"name": "P4", "rating": 1431}
    assert data["next_match"]["player_b"] == {"name": "P3", "rating": 1477}


def test_current_match_finished_late_in_block():
    client = make_client(StaticPlayerPool(POOL), now=BLOCK_START + DEFAULT_BLOCK_SECONDS - 1)
    data = client.get("/virtual-match/current").json()
    assert data["state"]["status"] == "FINISHED"
    assert max(data["state"]["final_score"]) >= 11
    assert data["seconds_until_next_match"] == pytest.approx(1)


def test_not_enough_players():
    client = make_client(StaticPlayerPool(POOL[:1]))
    resp = client.get("/virtual-match/current")
    assert resp.status_code == 409
    assert resp.json()["detail"] == NOT_ENOUGH_PLAYERS


def test_pool_with_one_distinct_player():
    client = make_client(StaticPlayerPool([Player("Solo", 1500)] * 2))
    resp = client.get("/virtual-match/current")
    assert resp.status_code == 409
    assert resp.json()["detail"] == NOT_ENOUGH_PLAYERS


def test_duplicate_names_in_pool_file(tmp_path):
    path = tmp_path / "players.json"
    path.write_text('{"players": [{"name": "Solo", "rating": 1500}, {"name": "Solo", "rating": 1500}]}')
    client = make_client(JsonPlayerPool(path))
    assert client.get("/virtual-match/current").status_code == 503


def test_missing_pool_file(tmp_path):
    client = make_client(JsonPlayerPool(tmp_path / "missing.json"))
    assert client.get("/virtual-match/current").status_code == 503
    assert client.get("/players").status_code == 503


def test_block_timeline(client):
    resp = client.get(f"/virtual-match/blocks/{BLOCK}")
    assert resp.status_code == 200
    data = resp.json()
    timeline = data["timeline"]
    assert timeline["seed"] == BLOCK
    assert len(timeline["points"]) == data["stats"]["total_points"]
    assert timeline["total_duration_seconds"] == timeline["points"][-1]["end_time"]
    assert timeline["final_score"] == [
        data["stats"]["player_a"]["points_won"],
        data["stats"]["player_b"]["points_won"],
    ]


def test_block_matches_current(client):
    current = client.get("/virtual-match/current").json()
    block = client.get(f"/virtual-match/blocks/{BLOCK}").json()
    assert block["timeline"]["total_duration_seconds"] == current["total_duration_seconds"]


def test_block_zero_rejected(client):
    assert client.get("/virtual-match/blocks/0").status_code == 400


def test_block_state(client):
    resp = client.get(f"/virtual-match/blocks/{BLOCK}/state", params={"elapsed": 0})
    assert resp.json()["status"] == "PLAYING"
    resp = client.get(f"/virtual-match/blocks/{BLOCK}/state", params={"elapsed": 100000})
    assert resp.json()["status"] == "FINISHED"


def test_block_state_rejects_negative_elapsed(client):
    resp = client.get(f"/virtual-match/blocks/{BLOCK}/state", params={"elapsed": -1})
    assert resp.status_code == 422


def test_simulate_match(client):
    body = {
        "seed": 12345,
        "player_a": {"name": "Anna", "rating": 1600},
        "player_b": {"name": "Bruno", "rating": 1400},
    }
    resp = client.post("/simulate/match", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["timeline"]["points"]) == 19
    assert data["timeline"]["final_score"] == [8, 11]
    assert data["timeline"]["winner"] == "B"
    assert data["timeline"]["total_duration_seconds"] == 207
    # Same request, same match
    assert client.post("/simulate/match", json=body).json() == data


@pytest.mark.parametrize("seed", [0, 2**31 - 1])
def test_simulate_match_rejects_bad_seed(client, seed):
    body = {
        "seed": seed,
        "player_a": {"name": "Anna", "rating": 1600},
        "player_b": {"name": "Bruno", "rating": 1400},
    }
    assert client.post("/simulate/match", json=body).status_code == 422
