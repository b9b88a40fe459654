from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from stakepool.api.app import create_app

DAY = 86_400
POOL = "POOL"


@pytest.fixture
def api(make_pool, fund):
    pool, stk, rwd = make_pool()
    fund(stk, "@alice", 5_000)
    app = create_app(boot_runtime=False)
    app.state.pool = pool
    return TestClient(app), pool, stk, rwd


def test_stake_claim_unstake_round(api) -> None:
    c, pool, stk, rwd = api

    r = c.post("/v1/stake", json={"participant": "@alice", "amount": 1_000, "now": 0})
    assert r.status_code == 200
    assert r.json()["position_id"] == 0

    r = c.post("/v1/claim", json={"participant": "@alice", "position_id": 0, "now": DAY})
    assert r.status_code == 200
    assert r.json()["reward"] == 10
    assert rwd.balance_of("@alice") == 10

    r = c.post("/v1/unstake", json={"participant": "@alice", "position_id": 0, "now": 2 * DAY})
    assert r.status_code == 200
    assert r.json()["payout"] == 1_010
    assert stk.balance_of("@alice") == 5_010


def test_position_reads(api) -> None:
    c, pool, _, _ = api
    pool.stake("@alice", 1_000, 0)
    pool.stake("@alice", 2_000, 0)
    pool.unstake("@alice", 0, DAY)

    j = c.get("/v1/positions/@alice", params={"now": DAY}).json()
    assert j["position_count"] == 2
    assert [p["id"] for p in j["positions"]["active"]] == [1]
    assert [p["id"] for p in j["positions"]["inactive"]] == [0]
    assert j["positions"]["active"][0]["end_time"] == 0
    assert j["pending_rewards"] == {"1": 20}
    assert j["pending_total"] == 20

    j = c.get("/v1/positions/@alice/1", params={"now": DAY}).json()
    assert j["position"]["amount"] == 2_000
    assert j["pending_reward"] == 20

    r = c.get("/v1/positions/@alice/9")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "invalid_id"

    j = c.get("/v1/totals", params={"now": DAY}).json()
    assert j["total_staked"] == 2_000
    assert j["total_active_reward"] == 20

    j = c.get("/v1/config").json()
    assert j["config"]["reward_ratio_denominator"] == 100
    assert j["paused"] is False


@pytest.mark.parametrize(
    "path, body, status, code",
    [
        ("/v1/stake", {"participant": "@alice", "amount": 0, "now": 0}, 400, "invalid_amount"),
        ("/v1/stake", {"participant": "@alice", "amount": 10**9, "now": 0}, 400, "insufficient_balance"),
        ("/v1/claim", {"participant": "@bob", "position_id": 0, "now": 0}, 404, "not_staked"),
        ("/v1/claim", {"participant": "@alice", "position_id": 3, "now": DAY}, 404, "invalid_id"),
        ("/v1/claim", {"participant": "@alice", "position_id": 0, "now": 1}, 400, "claim_too_soon"),
    ],
)
def test_ledger_errors_map_to_http(api, path, body, status, code) -> None:
    c, pool, _, _ = api
    pool.stake("@alice", 1_000, 0)

    r = c.post(path, json=body)
    assert r.status_code == status
    j = r.json()
    assert j["ok"] is False
    assert j["error"]["code"] == code


def test_closed_position_and_paused_pool(api) -> None:
    c, pool, _, _ = api
    pool.stake("@alice", 1_000, 0)
    pool.unstake("@alice", 0, DAY)

    r = c.post("/v1/unstake", json={"participant": "@alice", "position_id": 0, "now": 2 * DAY})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "inactive_position"

    pool.pause(pool.owner)
    r = c.post("/v1/stake", json={"participant": "@alice", "amount": 1, "now": 0})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "paused"


def test_malformed_bodies_are_rejected(api) -> None:
    c, _, _, _ = api
    assert c.post("/v1/stake", json={"participant": "@alice", "amount": 1, "extra": 1}).status_code == 422
    assert c.post("/v1/claim", json={"participant": "@alice", "position_id": -1}).status_code == 422
    assert c.post("/v1/stake", json={"participant": "", "amount": 1}).status_code == 422


def test_insufficient_reserve_is_reported(make_pool, fund) -> None:
    pool, stk, _ = make_pool(reward_reserve=0)
    fund(stk, "@alice", 1_000)
    pool.stake("@alice", 1_000, 0)
    app = create_app(boot_runtime=False)
    app.state.pool = pool

    r = TestClient(app).post("/v1/claim", json={"participant": "@alice", "position_id": 0, "now": DAY})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "insufficient_pool_reserve"
