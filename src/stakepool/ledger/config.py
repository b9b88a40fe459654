# src/stakepool/ledger/config.py
from __future__ import annotations

"""Configuration Store.

Process-wide reward parameters plus the handles of the two units. Every reward
computation reads the *current* values; nothing is snapshotted per position,
so a change applies to the next computation of every open position.

Fields are validated one at a time. Relations between fields (for example
`min_staking_period <= max_staking_period`) are deliberately left to the
operator.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from stakepool.ledger.constants import (
    DEFAULT_MAX_STAKING_PERIOD,
    DEFAULT_MIN_STAKING_PERIOD,
    DEFAULT_REWARD_INTERVAL,
    DEFAULT_REWARD_RATIO_DENOMINATOR,
    DEFAULT_REWARD_RATIO_NUMERATOR,
    DEFAULT_REWARD_UNIT,
    DEFAULT_STAKE_UNIT,
    NUMERIC_CONFIG_FIELDS,
    UNIT_CONFIG_FIELDS,
)
from stakepool.runtime.errors import InvalidConfiguration

Json = Dict[str, Any]


def require_positive_int(value: Any, *, field: str) -> int:
    # bool is an int subclass; disallow it explicitly
    if isinstance(value, bool):
        raise InvalidConfiguration("not_an_integer", {"field": field, "value": value})
    try:
        v = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration("not_an_integer", {"field": field, "value": repr(value)}) from e
    if v != value and not isinstance(value, str):
        raise InvalidConfiguration("not_an_integer", {"field": field, "value": value})
    if v <= 0:
        raise InvalidConfiguration("must_be_positive", {"field": field, "value": v})
    return v


def require_unit_handle(value: Any, *, field: str) -> str:
    s = value.strip() if isinstance(value, str) else ""
    if not s:
        raise InvalidConfiguration("unit_handle_required", {"field": field})
    return s


@dataclass
class StakingConfig:
    reward_ratio_numerator: int = DEFAULT_REWARD_RATIO_NUMERATOR
    reward_ratio_denominator: int = DEFAULT_REWARD_RATIO_DENOMINATOR
    reward_interval: int = DEFAULT_REWARD_INTERVAL
    min_staking_period: int = DEFAULT_MIN_STAKING_PERIOD
    max_staking_period: int = DEFAULT_MAX_STAKING_PERIOD
    stake_unit: str = DEFAULT_STAKE_UNIT
    reward_unit: str = DEFAULT_REWARD_UNIT

    def __post_init__(self) -> None:
        for name in NUMERIC_CONFIG_FIELDS:
            setattr(self, name, require_positive_int(getattr(self, name), field=name))
        for name in UNIT_CONFIG_FIELDS:
            setattr(self, name, require_unit_handle(getattr(self, name), field=name))

    def set_field(self, name: str, value: Any) -> Any:
        """Validate and assign a single field. Returns the stored value."""
        if name in NUMERIC_CONFIG_FIELDS:
            v: Any = require_positive_int(value, field=name)
        elif name in UNIT_CONFIG_FIELDS:
            v = require_unit_handle(value, field=name)
        else:
            raise InvalidConfiguration("unknown_field", {"field": str(name)})
        setattr(self, name, v)
        return v

    @property
    def accrual_divisor(self) -> int:
        return int(self.reward_ratio_denominator) * int(self.reward_interval)

    def to_dict(self) -> Json:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Any) -> "StakingConfig":
        """Build from a JSON-ish mapping; missing keys take defaults, unknown keys are ignored."""
        raw = d if isinstance(d, dict) else {}
        known = NUMERIC_CONFIG_FIELDS + UNIT_CONFIG_FIELDS
        return cls(**{k: raw[k] for k in known if k in raw})


__all__ = ["StakingConfig", "require_positive_int", "require_unit_handle"]
