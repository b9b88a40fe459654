from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from stakepool.api.routes_public_parts.common import _pool, _require_admin
from stakepool.api.schemas import AdminConfigRequest, AdminWithdrawRequest

router = APIRouter()

Json = Dict[str, Any]


@router.post("/v1/admin/pause")
def v1_admin_pause(request: Request) -> Json:
    owner = _require_admin(request)
    changed = _pool(request).pause(owner)
    return {"ok": True, "paused": True, "changed": changed}


@router.post("/v1/admin/unpause")
def v1_admin_unpause(request: Request) -> Json:
    owner = _require_admin(request)
    changed = _pool(request).unpause(owner)
    return {"ok": True, "paused": False, "changed": changed}


@router.post("/v1/admin/config")
def v1_admin_config(body: AdminConfigRequest, request: Request) -> Json:
    owner = _require_admin(request)
    pool = _pool(request)
    setter = getattr(pool, f"set_{body.field}")
    stored = setter(owner, body.value)
    return {"ok": True, "field": body.field, "value": stored, "config": pool.config.to_dict()}


@router.post("/v1/admin/withdraw")
def v1_admin_withdraw(body: AdminWithdrawRequest, request: Request) -> Json:
    """Unchecked withdrawal of stake units to the owner (trusted role)."""
    owner = _require_admin(request)
    amount = _pool(request).admin_withdraw(owner, body.amount)
    return {"ok": True, "owner": owner, "amount": amount}
