from __future__ import annotations

"""Query Layer.

Read-only reporting over the registry. The scans here walk every position ever
opened and are meant for reporting/ops paths, never for per-call ledger logic.
"""

from typing import Any, Dict, List

from stakepool.ledger.config import StakingConfig
from stakepool.ledger.registry import PositionRegistry
from stakepool.ledger.rewards import accrued_reward, total_active_reward
from stakepool.ledger.types import PositionListing, PositionSummary

Json = Dict[str, Any]


def total_staked_amount(registry: PositionRegistry) -> int:
    """Sum of principal over active positions (linear scan)."""
    total = 0
    for _participant, _pid, pos in registry.iter_all():
        if pos.is_active:
            total += int(pos.amount)
    return int(total)


def running_total_matches_scan(registry: PositionRegistry) -> bool:
    return registry.active_amount == total_staked_amount(registry)


def list_positions(registry: PositionRegistry, participant: str) -> PositionListing:
    """Split every position `participant` ever opened into active / inactive, ordered by id."""
    active: List[PositionSummary] = []
    inactive: List[PositionSummary] = []
    for pid, pos in registry.iter_positions(participant):
        if pos.is_active:
            active.append(PositionSummary(pid, int(pos.start_time), 0, int(pos.total_rewards)))
        else:
            inactive.append(
                PositionSummary(pid, int(pos.start_time), int(pos.last_claimed_time), int(pos.total_rewards))
            )
    return PositionListing(active=active, inactive=inactive)


def pending_rewards_by_position(
    registry: PositionRegistry, participant: str, config: StakingConfig, now: int
) -> Dict[int, int]:
    return {pid: accrued_reward(pos, config, now) for pid, pos in registry.iter_positions(participant) if pos.is_active}


def pool_totals(registry: PositionRegistry, config: StakingConfig, now: int) -> Json:
    return {
        "now": int(now),
        "total_staked": total_staked_amount(registry),
        "total_active_reward": total_active_reward(registry, config, now),
        "participants": len(registry.roster),
    }


__all__ = [
    "total_staked_amount",
    "running_total_matches_scan",
    "list_positions",
    "pending_rewards_by_position",
    "pool_totals",
]
