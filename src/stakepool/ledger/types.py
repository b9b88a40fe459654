"""stakepool.ledger.types

Position records kept by the registry and the read-only views handed out by
the query layer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

Json = Dict[str, Any]


@dataclass(slots=True)
class StakePosition:
    """One stake deposit and its accrual/claim history.

    `start_time` and `amount` never change after allocation. `last_claimed_time`
    and `total_rewards` move only through claim/close. `is_active` goes from
    True to False exactly once.
    """

    start_time: int
    amount: int
    last_claimed_time: int
    total_rewards: int = 0
    is_active: bool = True

    @property
    def exists(self) -> bool:
        # amount == 0 is the registry's "no such position"
        return int(self.amount) > 0

    def accrual_end(self, max_staking_period: int) -> int:
        return int(self.start_time) + int(max_staking_period)

    def to_dict(self) -> Json:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PositionSummary:
    """Reporting row: `end_time` is 0 while the position is active."""

    id: int
    start_time: int
    end_time: int
    total_rewards: int

    def to_dict(self) -> Json:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PositionListing:
    active: List[PositionSummary]
    inactive: List[PositionSummary]

    def to_dict(self) -> Json:
        return {
            "active": [p.to_dict() for p in self.active],
            "inactive": [p.to_dict() for p in self.inactive],
        }


__all__ = ["StakePosition", "PositionSummary", "PositionListing", "Json"]
