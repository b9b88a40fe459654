# src/stakepool/ledger/rewards.py
from __future__ import annotations

"""Reward Engine.

Pure functions over (position, current config, now). No caching: the rate is
re-read from the config on every call.
"""

from typing import Optional

from stakepool.ledger.config import StakingConfig
from stakepool.ledger.registry import PositionRegistry
from stakepool.ledger.types import StakePosition


def _linear_reward(amount: int, elapsed: int, cfg: StakingConfig) -> int:
    if elapsed <= 0 or amount <= 0:
        return 0
    # floor division: fractional units are dropped, not carried forward
    return (int(amount) * int(cfg.reward_ratio_numerator) * int(elapsed)) // cfg.accrual_divisor


def accrued_reward(position: Optional[StakePosition], config: StakingConfig, now: int) -> int:
    """Reward accrued since the last claim, capped at the accrual window.

    Window is [start_time, start_time + max_staking_period]:
      - inside the window: pay for (now - last_claimed_time)
      - window ended after the last claim: pay the unclaimed tail up to the boundary
      - last claim already past the boundary: nothing left
    """
    if position is None or not position.exists or not position.is_active:
        return 0

    t = int(now)
    last = int(position.last_claimed_time)
    boundary = position.accrual_end(config.max_staking_period)

    if t <= boundary:
        return _linear_reward(position.amount, t - last, config)
    if last <= boundary:
        return _linear_reward(position.amount, boundary - last, config)
    return 0


def accrued_reward_for_participant(
    registry: PositionRegistry, participant: str, config: StakingConfig, now: int
) -> int:
    total = 0
    for _pid, pos in registry.iter_positions(participant):
        if pos.is_active:
            total += accrued_reward(pos, config, now)
    return int(total)


def total_active_reward(registry: PositionRegistry, config: StakingConfig, now: int) -> int:
    """Pending reward across the whole roster.

    Reporting path only: cost grows with every position ever opened.
    """
    total = 0
    for participant in registry.roster:
        total += accrued_reward_for_participant(registry, participant, config, now)
    return int(total)


__all__ = ["accrued_reward", "accrued_reward_for_participant", "total_active_reward"]
