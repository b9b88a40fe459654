from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from stakepool.api.app import create_app
from stakepool.api.structured_logging import pool_operation
from stakepool.runtime import metrics

DAY = 86_400


def _pool_requests(caplog) -> list[dict]:
    out = []
    for rec in caplog.records:
        if rec.name != "stakepool.http":
            continue
        j = json.loads(rec.getMessage())
        if j.get("event") == "pool_request":
            out.append(j)
    return out


@pytest.fixture
def client(make_pool, fund, monkeypatch):
    monkeypatch.delenv("STAKEPOOL_LOG_REQUESTS", raising=False)
    pool, stk, _ = make_pool()
    fund(stk, "@alice", 1_000)
    app = create_app(boot_runtime=False)
    app.state.pool = pool
    return TestClient(app), pool


@pytest.mark.parametrize(
    "method, path, op",
    [
        ("POST", "/v1/stake", "stake"),
        ("POST", "/v1/admin/pause", "admin_pause"),
        ("GET", "/v1/positions/@alice", "read"),
        ("POST", "/metrics", "read"),
    ],
)
def test_pool_operation_names(method: str, path: str, op: str) -> None:
    assert pool_operation(method, path) == op


def test_accepted_and_rejected_operations_are_logged_with_codes(client, caplog) -> None:
    c, _ = client
    caplog.set_level(logging.INFO, logger="stakepool.http")

    assert c.post("/v1/stake", json={"participant": "@alice", "amount": 1_000, "now": 0}).status_code == 200
    assert c.post("/v1/claim", json={"participant": "@alice", "position_id": 0, "now": 1}).status_code == 400
    assert c.get("/v1/positions/@alice/7").status_code == 404

    logged = _pool_requests(caplog)
    assert [(j["op"], j["outcome"], j["error_code"]) for j in logged] == [
        ("stake", "ok", None),
        ("claim", "rejected", "claim_too_soon"),
        ("read", "rejected", "invalid_id"),
    ]
    assert all(j["request_id"] for j in logged)


def test_write_operations_feed_http_counters(client) -> None:
    c, _ = client
    c.post("/v1/stake", json={"participant": "@alice", "amount": 1_000, "now": 0})
    c.post("/v1/stake", json={"participant": "@alice", "amount": 0, "now": 0})
    c.get("/v1/totals")

    counters = metrics.snapshot()["counters"]
    assert counters["http_stake_ok"] == 1
    assert counters["http_stake_rejected"] == 1
    assert not any(k.startswith("http_read") for k in counters)


def test_request_logging_can_be_turned_off(make_pool, monkeypatch, caplog) -> None:
    monkeypatch.setenv("STAKEPOOL_LOG_REQUESTS", "0")
    pool, _, _ = make_pool()
    app = create_app(boot_runtime=False)
    app.state.pool = pool
    caplog.set_level(logging.INFO, logger="stakepool.http")

    r = TestClient(app).get("/v1/health", headers={"x-request-id": "quiet-1"})
    assert r.headers.get("x-request-id") == "quiet-1"
    assert _pool_requests(caplog) == []


def test_metrics_expose_pool_gauges(client, monkeypatch) -> None:
    c, pool = client
    monkeypatch.setenv("STAKEPOOL_METRICS_ENABLED", "1")
    pool.stake("@alice", 400, 0)
    pool.stake("@alice", 600, 0)
    pool.unstake("@alice", 0, DAY)
    pool.pause(pool.owner)

    lines = set(c.get("/metrics").text.splitlines())
    assert "stakepool_pool_ready 1" in lines
    assert "stakepool_pool_paused 1" in lines
    assert "stakepool_pool_participants 1" in lines
    assert "stakepool_pool_active_positions 1" in lines
    assert "stakepool_pool_closed_positions 1" in lines
    assert "stakepool_pool_active_principal 600" in lines
    assert "stakepool_pool_events 4" in lines


def test_metrics_without_pool_and_when_disabled(monkeypatch) -> None:
    app = create_app(boot_runtime=False)
    c = TestClient(app)

    monkeypatch.delenv("STAKEPOOL_METRICS_ENABLED", raising=False)
    r = c.get("/metrics")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "metrics_disabled"

    monkeypatch.setenv("STAKEPOOL_METRICS_ENABLED", "1")
    assert "stakepool_pool_ready 0" in c.get("/metrics").text.splitlines()
