# src/stakepool/api/structured_logging.py
from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from stakepool.runtime import metrics
from stakepool.runtime.pool_logging import log_event

_OFF = {"0", "false", "no", "n", "off"}


def configure_structured_logging(level_name: Optional[str] = None) -> None:
    """Root logger writes one JSON line per record to stderr.

    Level from the argument, else STAKEPOOL_LOG_LEVEL, else INFO. Calling it
    again only adjusts the level.
    """
    name = (level_name or os.environ.get("STAKEPOOL_LOG_LEVEL") or "INFO").strip().upper()
    level = getattr(logging, name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(h, "_stakepool", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler._stakepool = True  # type: ignore[attr-defined]
    root.handlers = [handler]


def pool_operation(method: str, path: str) -> str:
    """Name of the ledger operation a request maps to.

    POST /v1/stake -> "stake", POST /v1/admin/pause -> "admin_pause";
    anything else is a read.
    """
    if method.upper() != "POST" or not path.startswith("/v1/"):
        return "read"
    return path[len("/v1/") :].strip("/").replace("/", "_") or "read"


def record_rejection(request: Request, code: str) -> None:
    """Called by the error handlers so the request log carries the ledger error code."""
    request.state.error_code = str(code)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One `pool_request` log line per request, tagged with the pool operation.

    Carries the outcome (ok / rejected / failed) and, for rejections, the
    StakingError or ApiError code. Write operations also bump
    `http_<op>_<outcome>` counters. STAKEPOOL_LOG_REQUESTS=0 turns it off.
    """

    def __init__(self, app) -> None:
        super().__init__(app)
        self._enabled = (os.environ.get("STAKEPOOL_LOG_REQUESTS") or "1").strip().lower() not in _OFF
        self._logger = logging.getLogger("stakepool.http")

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        if not self._enabled:
            response = await call_next(request)
            response.headers.setdefault("x-request-id", request_id)
            return response

        op = pool_operation(request.method, request.url.path)
        started = time.monotonic()
        status = 500
        try:
            response = await call_next(request)
            status = int(response.status_code)
            response.headers.setdefault("x-request-id", request_id)
            return response
        finally:
            code = getattr(request.state, "error_code", None)
            outcome = "ok" if status < 400 else ("failed" if status >= 500 else "rejected")
            if op != "read":
                metrics.inc_counter(f"http_{op}_{outcome}")
            log_event(
                self._logger,
                "pool_request",
                level=logging.WARNING if outcome == "failed" else logging.INFO,
                request_id=request_id,
                op=op,
                path=request.url.path,
                status=status,
                outcome=outcome,
                error_code=code,
                duration_ms=int((time.monotonic() - started) * 1000),
            )
