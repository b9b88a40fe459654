# src/stakepool/runtime/pool_boot.py

from __future__ import annotations

import logging
from typing import Optional

from stakepool.ledger.token import TokenLedger, UnitRegistry
from stakepool.runtime.pool import StakingPool
from stakepool.runtime.pool_config import PoolConfig, load_pool_config
from stakepool.runtime.pool_logging import log_event
from stakepool.runtime.seed_config import apply_seed_to_units, load_seed, resolve_seed_path

log = logging.getLogger("stakepool.boot")


def build_units(cfg: PoolConfig) -> UnitRegistry:
    """In-memory backends for the configured handles (one ledger if both handles match)."""
    units = UnitRegistry()
    units.register(cfg.stake_unit, TokenLedger(cfg.stake_unit))
    if cfg.reward_unit not in units:
        units.register(cfg.reward_unit, TokenLedger(cfg.reward_unit))
    return units


def build_pool(cfg: Optional[PoolConfig] = None, *, units: Optional[UnitRegistry] = None) -> StakingPool:
    """
    Build a StakingPool from an explicit config or, if omitted, from
    STAKEPOOL_CONFIG_PATH / defaults.

    When the pool owns its in-memory units, the seed file (cfg.seed_path or
    STAKEPOOL_SEED_PATH) funds participants, the pool reserve and the pool's
    allowances before the pool is handed out.

    `stakepool.api.app` calls this with no args in production.
    """
    c = cfg or load_pool_config()
    own_units = units is None
    u = build_units(c) if own_units else units

    seed_path = resolve_seed_path(c.seed_path)
    if seed_path and own_units:
        minted = apply_seed_to_units(u, load_seed(seed_path), pool_account=c.pool_account)
        log_event(log, "seed_applied", path=seed_path, minted=minted)

    return StakingPool(
        owner=c.owner,
        units=u,
        config=c.staking_config(),
        pool_account=c.pool_account,
    )


__all__ = ["build_pool", "build_units"]
