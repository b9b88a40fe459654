from __future__ import annotations

import os
import time

from fastapi import APIRouter, Request

router = APIRouter()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _health_payload(request: Request) -> dict[str, object]:
    # health must never crash; no pool just means "not ready"
    pool = getattr(request.app.state, "pool", None)
    cfg = getattr(request.app.state, "pool_cfg", None)

    return {
        "ok": pool is not None,
        "service": "stakepool",
        "version": "v1",
        "ts_ms": _now_ms(),
        "pool_id": getattr(cfg, "pool_id", None) or os.environ.get("STAKEPOOL_POOL_ID") or None,
        "paused": bool(pool.paused) if pool is not None else None,
        "owner": pool.owner if pool is not None else None,
    }


@router.get("/v1/health")
def v1_health(request: Request) -> dict[str, object]:
    return _health_payload(request)


@router.get("/healthz")
def healthz(request: Request) -> dict[str, object]:
    # Kubernetes-style alias
    return _health_payload(request)
