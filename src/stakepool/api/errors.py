from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stakepool.api.structured_logging import record_rejection
from stakepool.runtime.errors import StakingError

# StakingError.code -> HTTP status; everything else is a 400
_STATUS_BY_CODE: Dict[str, int] = {
    "unauthorized": 403,
    "not_staked": 404,
    "invalid_id": 404,
    "paused": 409,
    "reentrant_call": 409,
}


@dataclass(frozen=True, slots=True, eq=False)
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: Dict[str, Any]

    @staticmethod
    def bad_request(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(400, code, message, details or {})

    @staticmethod
    def unauthorized(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(401, code, message, details or {})

    @staticmethod
    def forbidden(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(403, code, message, details or {})

    @staticmethod
    def not_found(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(404, code, message, details or {})

    @staticmethod
    def internal(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(500, code, message, details or {})

    @staticmethod
    def from_staking_error(e: StakingError) -> "ApiError":
        body = e.to_json()
        return ApiError(_STATUS_BY_CODE.get(e.code, 400), body["code"], body["message"], body["details"])


def _error_response(err: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=err.status_code,
        content={"ok": False, "error": {"code": err.code, "message": err.message, "details": err.details}},
    )


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        record_rejection(request, exc.code)
        return _error_response(exc)

    @app.exception_handler(StakingError)
    async def _staking_error(request: Request, exc: StakingError) -> JSONResponse:
        record_rejection(request, exc.code)
        return _error_response(ApiError.from_staking_error(exc))
