from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Request

from stakepool.api.errors import ApiError
from stakepool.api.routes_public_parts.common import _pool, _resolve_now
from stakepool.runtime.queries import pending_rewards_by_position

router = APIRouter()

Json = Dict[str, Any]


@router.get("/v1/config")
def v1_config(request: Request) -> Json:
    pool = _pool(request)
    return {"ok": True, "config": pool.config.to_dict(), "paused": pool.paused, "owner": pool.owner}


@router.get("/v1/positions/{participant}")
def v1_positions(participant: str, request: Request, now: Optional[int] = None) -> Json:
    """All positions of a participant, split active / inactive, plus pending reward per active id."""
    pool = _pool(request)
    t = _resolve_now(now)
    listing = pool.list_positions(participant)
    pending = pending_rewards_by_position(pool.registry, participant, pool.config, t)
    return {
        "ok": True,
        "participant": participant,
        "now": t,
        "position_count": pool.position_count(participant),
        "positions": listing.to_dict(),
        "pending_rewards": {str(k): v for k, v in pending.items()},
        "pending_total": sum(pending.values()),
    }


@router.get("/v1/positions/{participant}/{position_id}")
def v1_position_get(participant: str, position_id: int, request: Request, now: Optional[int] = None) -> Json:
    pool = _pool(request)
    pos = pool.get_position(participant, position_id)
    if pos is None:
        raise ApiError.not_found(
            "invalid_id", "position not found", {"participant": participant, "position_id": position_id}
        )
    t = _resolve_now(now)
    return {
        "ok": True,
        "participant": participant,
        "position_id": position_id,
        "now": t,
        "position": pos.to_dict(),
        "pending_reward": pool.accrued_reward(participant, position_id, t),
    }


@router.get("/v1/totals")
def v1_totals(request: Request, now: Optional[int] = None) -> Json:
    """Pool-wide aggregates. Linear in positions ever opened; reporting only."""
    pool = _pool(request)
    return {"ok": True, **pool.totals(_resolve_now(now))}
