from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from stakepool.api.routes_public_parts.common import _pool, _resolve_now
from stakepool.api.schemas import PositionRequest, StakeRequest

router = APIRouter()

Json = Dict[str, Any]

# Identity of `participant` is established upstream (gateway/auth proxy);
# these handlers trust the body.


@router.post("/v1/stake")
def v1_stake(body: StakeRequest, request: Request) -> Json:
    pool = _pool(request)
    t = _resolve_now(body.now)
    pid = pool.stake(body.participant, body.amount, t)
    return {"ok": True, "participant": body.participant, "position_id": pid, "amount": body.amount, "now": t}


@router.post("/v1/claim")
def v1_claim(body: PositionRequest, request: Request) -> Json:
    pool = _pool(request)
    t = _resolve_now(body.now)
    reward = pool.claim(body.participant, body.position_id, t)
    return {"ok": True, "participant": body.participant, "position_id": body.position_id, "reward": reward, "now": t}


@router.post("/v1/unstake")
def v1_unstake(body: PositionRequest, request: Request) -> Json:
    pool = _pool(request)
    t = _resolve_now(body.now)
    payout = pool.unstake(body.participant, body.position_id, t)
    return {"ok": True, "participant": body.participant, "position_id": body.position_id, "payout": payout, "now": t}
