# src/stakepool/ledger/constants.py
from __future__ import annotations

"""Default staking parameters.

Durations are whole seconds. Amounts are integer base units of the
respective unit (no decimals at the ledger layer).
"""

ONE_DAY_SECONDS: int = 86_400

# Reward ratio: reward units per stake unit per reward interval.
DEFAULT_REWARD_RATIO_NUMERATOR: int = 1
DEFAULT_REWARD_RATIO_DENOMINATOR: int = 100
DEFAULT_REWARD_INTERVAL: int = ONE_DAY_SECONDS

# Holding window
DEFAULT_MIN_STAKING_PERIOD: int = 7 * ONE_DAY_SECONDS
DEFAULT_MAX_STAKING_PERIOD: int = 365 * ONE_DAY_SECONDS

# Unit handles for the in-memory reference backend
DEFAULT_STAKE_UNIT: str = "STK"
DEFAULT_REWARD_UNIT: str = "RWD"

# Custodial account id of the pool inside the unit backends
DEFAULT_POOL_ACCOUNT_ID: str = "POOL"
DEFAULT_OWNER_ID: str = "@admin"

NUMERIC_CONFIG_FIELDS = (
    "reward_ratio_numerator",
    "reward_ratio_denominator",
    "reward_interval",
    "min_staking_period",
    "max_staking_period",
)

UNIT_CONFIG_FIELDS = ("stake_unit", "reward_unit")
