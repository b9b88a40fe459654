from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Tuple

import pytest

# Ensure local "src/" takes precedence over any globally-installed "stakepool" package.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

src_str = str(SRC)
if src_str not in sys.path:
    sys.path.insert(0, src_str)

from stakepool.ledger.config import StakingConfig  # noqa: E402
from stakepool.ledger.token import TokenLedger, UnitRegistry  # noqa: E402
from stakepool.runtime import metrics  # noqa: E402
from stakepool.runtime.pool import StakingPool  # noqa: E402

OWNER = "@admin"
POOL = "POOL"

PoolFactory = Callable[..., Tuple[StakingPool, TokenLedger, TokenLedger]]


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def make_pool() -> PoolFactory:
    """Pool with separate stake/reward ledgers and a funded reward reserve.

    Config defaults: ratio 1/100 per day, min 100s, max 1000 days.
    """

    def _make(
        *,
        reward_reserve: int = 1_000_000,
        stake_reserve: int = 1_000_000,
        **overrides,
    ) -> Tuple[StakingPool, TokenLedger, TokenLedger]:
        params = dict(
            reward_ratio_numerator=1,
            reward_ratio_denominator=100,
            reward_interval=86_400,
            min_staking_period=100,
            max_staking_period=1_000 * 86_400,
        )
        params.update(overrides)
        stk = TokenLedger("STK")
        rwd = TokenLedger("RWD")
        units = UnitRegistry({"STK": stk, "RWD": rwd})
        pool = StakingPool(owner=OWNER, units=units, config=StakingConfig(**params), pool_account=POOL)
        if reward_reserve:
            rwd.mint(POOL, reward_reserve)
        if stake_reserve:
            stk.mint(POOL, stake_reserve)
        return pool, stk, rwd

    return _make


@pytest.fixture
def fund() -> Callable[[TokenLedger, str, int], None]:
    """Mint to a participant and approve the pool for the same amount."""

    def _fund(token: TokenLedger, participant: str, amount: int) -> None:
        token.mint(participant, amount)
        token.approve(participant, POOL, token.allowance(participant, POOL) + amount)

    return _fund
