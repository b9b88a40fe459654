from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Type


@dataclass(eq=False)
class StakingError(Exception):
    """Canonical error type for ledger operations and configuration changes.

    Subclasses pin a stable `code`; callers branch on the class or the code,
    never on `reason` (free-form, for humans and logs).
    """

    reason: str
    details: Any | None = None

    code: ClassVar[str] = "staking_error"

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"

    def to_json(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.reason,
            "details": self.details if isinstance(self.details, dict) else {},
        }


class InvalidConfiguration(StakingError):
    code = "invalid_configuration"


class InvalidAmount(StakingError):
    code = "invalid_amount"


class InsufficientBalance(StakingError):
    code = "insufficient_balance"


class NotStaked(StakingError):
    code = "not_staked"


class InvalidId(StakingError):
    code = "invalid_id"


class InactivePosition(StakingError):
    code = "inactive_position"


class ClaimTooSoon(StakingError):
    code = "claim_too_soon"


class InsufficientPoolReserve(StakingError):
    code = "insufficient_pool_reserve"


class Unauthorized(StakingError):
    code = "unauthorized"


class Paused(StakingError):
    code = "paused"


class ReentrantCall(StakingError):
    code = "reentrant_call"


class TransferFailed(StakingError):
    code = "transfer_failed"


ERRORS_BY_CODE: Dict[str, Type[StakingError]] = {
    cls.code: cls
    for cls in (
        InvalidConfiguration,
        InvalidAmount,
        InsufficientBalance,
        NotStaked,
        InvalidId,
        InactivePosition,
        ClaimTooSoon,
        InsufficientPoolReserve,
        Unauthorized,
        Paused,
        ReentrantCall,
        TransferFailed,
    )
}


__all__ = [
    "StakingError",
    "InvalidConfiguration",
    "InvalidAmount",
    "InsufficientBalance",
    "NotStaked",
    "InvalidId",
    "InactivePosition",
    "ClaimTooSoon",
    "InsufficientPoolReserve",
    "Unauthorized",
    "Paused",
    "ReentrantCall",
    "TransferFailed",
    "ERRORS_BY_CODE",
]
