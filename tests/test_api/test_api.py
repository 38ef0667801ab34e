"""Tests for API endpoints."""

from __future__ import annotations

import asyncio
import json
import math

import pytest
from fastapi.testclient import TestClient

from ngonchaos.api import simulate as simulate_api
from ngonchaos.engine.simulation import SimulationEngine
from ngonchaos.main import app
from ngonchaos.models.requests import SimulateRequest


client = TestClient(app)


def _sse_events(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["rules_registered"] >= 4


def test_rules_listing():
    response = client.get("/api/rules")
    assert response.status_code == 200
    names = {r["name"] for r in response.json()}
    assert {"none", "noRepeat", "noAdjacent", "noNeighbors"} <= names


def test_simulate_heptagon():
    response = client.post("/api/simulate", json={"n": 7, "n_iter": 1000, "seed": 1})
    assert response.status_code == 200
    data = response.json()
    assert data["n"] == 7
    assert len(data["vertices"]) == 7
    assert data["ratio_used"] == pytest.approx(1 / (1 + 2 * math.sin(math.pi / 14)))
    assert data["iterations"] == 1000
    assert data["emitted"] == 950
    assert len(data["points"]) == 950
    assert len(data["vertex_indices"]) == 950
    assert data["completed"] is True
    assert data["rule_used"]["source"] == "preset"


def test_simulate_is_reproducible():
    body = {"n": 9, "n_iter": 500, "seed": 42, "rule": "noAdjacent"}
    a = client.post("/api/simulate", json=body).json()
    b = client.post("/api/simulate", json=body).json()
    assert a["points"] == b["points"]


def test_simulate_without_points():
    response = client.post("/api/simulate", json={"n": 8, "n_iter": 200, "include_points": False})
    data = response.json()
    assert data["points"] == []
    assert data["emitted"] == 150


def test_offsets_override_rule():
    response = client.post(
        "/api/simulate",
        json={"n": 7, "n_iter": 300, "seed": 3, "rule": "noRepeat", "exclude_offsets": [0, 1, -1]},
    )
    data = response.json()
    assert data["rule_used"]["source"] == "offsets"
    assert data["rule_used"]["exclude_offsets"] == [0, 1, -1]


@pytest.mark.parametrize(
    "body, kind",
    [
        ({"n": 4}, "InvalidN"),
        ({"n": 7, "ratio": 2.0}, "InvalidRatio"),
        ({"n": 7, "ratio": "half"}, "InvalidRatio"),
        ({"n": 7, "rule": "spiral"}, "UnknownRule"),
        ({"n": 5, "n_iter": 50, "exclude_offsets": [-2, -1, 0, 1, 2]}, "EmptyAllowedSet"),
        ({"n": 7, "n_iter": 10_000_000}, "InvalidParameter"),
        ({"n": 7, "n_iter": 10, "seed": -1}, "InvalidParameter"),
    ],
)
def test_simulate_errors(body, kind):
    response = client.post("/api/simulate", json=body)
    assert response.status_code == 422
    assert response.json()["error"] == kind


def test_stream():
    response = client.post(
        "/api/simulate/stream", json={"n": 7, "n_iter": 4000, "seed": 2, "burn_in": 100}
    )
    assert response.status_code == 200
    events = _sse_events(response.text)
    kinds = [e for e, _ in events]
    assert kinds[0] == "start"
    assert kinds[-2:] == ["result", "done"]
    assert "points" in kinds

    start = events[0][1]
    assert len(start["vertices"]) == 7

    streamed = sum(len(d["points"]) for e, d in events if e == "points")
    assert streamed == 3900
    result = dict(events)["result"]
    assert result["emitted"] == 3900
    assert result["completed"] is True


def test_stream_config_error():
    response = client.post("/api/simulate/stream", json={"n": 3})
    events = _sse_events(response.text)
    assert len(events) == 1
    assert events[0][0] == "error"
    assert events[0][1]["error"] == "InvalidN"


def test_stream_mid_run_error():
    response = client.post(
        "/api/simulate/stream",
        json={"n": 5, "n_iter": 50, "burn_in": 0, "exclude_offsets": [-2, -1, 0, 1, 2]},
    )
    events = _sse_events(response.text)
    assert events[0][0] == "start"
    assert events[-1][0] == "error"
    assert events[-1][1]["error"] == "EmptyAllowedSet"


def test_stream_negative_seed():
    response = client.post("/api/simulate/stream", json={"n": 7, "n_iter": 10, "seed": -1})
    events = _sse_events(response.text)
    assert [e for e, _ in events] == ["error"]
    assert events[0][1]["error"] == "InvalidParameter"


def test_extent_reported():
    body = {"n": 7, "n_iter": 100, "ratio": 1.2, "radius": 2.0, "include_points": False}
    data = client.post("/api/simulate", json=body).json()
    assert data["extent"] == pytest.approx(1.2 * 2.0 / 0.8)

    events = _sse_events(client.post("/api/simulate/stream", json=body).text)
    assert events[0][1]["extent"] == pytest.approx(data["extent"])


def test_stream_worker_crash_reported(monkeypatch):
    def _boom(self, batch_size=1500):
        raise RuntimeError("worker exploded")
        yield  # pragma: no cover

    monkeypatch.setattr(SimulationEngine, "run_streaming", _boom)
    response = client.post("/api/simulate/stream", json={"n": 7, "n_iter": 100})
    events = _sse_events(response.text)
    kinds = [e for e, _ in events]
    assert kinds == ["start", "error"]
    assert events[-1][1]["error"] == "InternalError"
    assert "worker exploded" in events[-1][1]["message"]


def test_stream_disconnect_cancels_run(monkeypatch):
    engines = []
    build = simulate_api._build_engine

    def _capture(req, **kwargs):
        engine = build(req, **kwargs)
        engines.append(engine)
        return engine

    monkeypatch.setattr(simulate_api, "_build_engine", _capture)

    async def _consume_then_leave():
        req = SimulateRequest(n=7, n_iter=2_000_000, seed=1, burn_in=0)
        stream = simulate_api._stream_simulate(req)
        assert (await stream.__anext__()).startswith("event: start")
        assert (await stream.__anext__()).startswith("event: points")
        await stream.aclose()

    asyncio.run(_consume_then_leave())

    engine = engines[0]
    assert engine.cancelled
    result = engine.result()
    assert result.completed is False
    assert result.iterations < 2_000_000
