from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Request

from stakepool.api.routes_public_parts.common import _int_param, _pool

router = APIRouter()

Json = Dict[str, Any]

_MAX_LIMIT = 500


@router.get("/v1/events")
def v1_events(request: Request, limit: Optional[str] = None) -> Json:
    """Tail of the notification log, oldest first."""
    cfg = getattr(request.app.state, "cfg", None)
    default = int(getattr(cfg, "default_events_limit", 50) or 50)
    n = min(max(_int_param(limit, default), 1), _MAX_LIMIT)
    log = _pool(request).events
    return {"ok": True, "total": len(log), "events": [e.to_dict() for e in log.tail(n)]}
