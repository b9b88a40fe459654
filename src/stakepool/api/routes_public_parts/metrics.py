from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Request, Response

from stakepool.api.errors import ApiError
from stakepool.runtime import metrics as pool_metrics

router = APIRouter()


def _pool_gauges(request: Request) -> Dict[str, int]:
    """Point-in-time pool state, refreshed on every scrape.

    Walks the registry once; fine for a scrape interval, not for hot paths.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        return {"pool_ready": 0}

    reg = pool.registry
    active = 0
    closed = 0
    for _participant, _pid, pos in reg.iter_all():
        if pos.is_active:
            active += 1
        else:
            closed += 1

    return {
        "pool_ready": 1,
        "pool_paused": int(bool(pool.paused)),
        "pool_participants": len(reg.roster),
        "pool_active_positions": active,
        "pool_closed_positions": closed,
        "pool_active_principal": int(reg.active_amount),
        "pool_events": len(pool.events),
    }


@router.get("/metrics")
def metrics(request: Request) -> Response:
    """Operation counters plus pool gauges in Prometheus text. Off unless STAKEPOOL_METRICS_ENABLED is set."""
    if not pool_metrics.metrics_enabled():
        raise ApiError.not_found("metrics_disabled", "set STAKEPOOL_METRICS_ENABLED=1 to expose /metrics", {})

    for name, value in _pool_gauges(request).items():
        pool_metrics.set_gauge(name, value)
    return Response(content=pool_metrics.format_prometheus(), media_type="text/plain")
