from __future__ import annotations

import hmac
import time
from typing import Any, Dict, Optional

from fastapi import Request

from stakepool.api.errors import ApiError
from stakepool.runtime.pool import StakingPool

Json = Dict[str, Any]


def _now_s() -> int:
    return int(time.time())


def _pool(request: Request) -> StakingPool:
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise ApiError.internal("not_ready", "pool not attached to app.state", {})
    return pool


def _resolve_now(v: Optional[int]) -> int:
    """Caller-supplied time if given, else wall clock (unix seconds)."""
    if v is None:
        return _now_s()
    return int(v)


def _bearer_token(request: Request) -> str:
    raw = request.headers.get("authorization") or ""
    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def _require_admin(request: Request) -> str:
    """Check the admin bearer token and return the pool owner id to act as.

    Fail-closed: no configured token means the admin surface is disabled.
    """
    cfg = getattr(request.app.state, "cfg", None)
    expected = getattr(cfg, "admin_token", None) if cfg is not None else None
    if not expected:
        raise ApiError.forbidden("admin_disabled", "STAKEPOOL_ADMIN_TOKEN is not configured", {})

    presented = _bearer_token(request)
    if not presented:
        raise ApiError.unauthorized("admin_token_required", "missing bearer token", {})
    if not hmac.compare_digest(presented.encode("utf-8"), str(expected).encode("utf-8")):
        raise ApiError.forbidden("admin_token_invalid", "bad admin token", {})

    return _pool(request).owner


def _int_param(v: Any, default: int) -> int:
    """Parse an int-ish query param safely."""
    if v is None:
        return int(default)
    try:
        s = str(v).strip()
        if s == "":
            return int(default)
        return int(s)
    except ValueError:
        return int(default)
