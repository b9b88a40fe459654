# src/stakepool/runtime/pool_config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from stakepool.ledger.config import StakingConfig
from stakepool.ledger.constants import (
    DEFAULT_MAX_STAKING_PERIOD,
    DEFAULT_MIN_STAKING_PERIOD,
    DEFAULT_OWNER_ID,
    DEFAULT_POOL_ACCOUNT_ID,
    DEFAULT_REWARD_INTERVAL,
    DEFAULT_REWARD_RATIO_DENOMINATOR,
    DEFAULT_REWARD_RATIO_NUMERATOR,
    DEFAULT_REWARD_UNIT,
    DEFAULT_STAKE_UNIT,
)

Json = Dict[str, Any]


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _seed_path(v: Any, config_file: Path) -> str:
    s = _as_str(v, "").strip()
    if not s:
        return ""
    # relative seed paths are resolved next to the config file
    sp = Path(s).expanduser()
    if not sp.is_absolute():
        sp = config_file.parent / sp
    return str(sp)


@dataclass(frozen=True)
class PoolConfig:
    pool_id: str
    owner: str
    mode: str  # "dev" | "testnet" | "prod"

    # custodial account id inside the unit backends
    pool_account: str

    reward_ratio_numerator: int
    reward_ratio_denominator: int
    reward_interval: int
    min_staking_period: int
    max_staking_period: int
    stake_unit: str
    reward_unit: str

    api_host: str
    api_port: int

    log_level: str

    # optional JSON file of seed balances/allowances (see seed_config)
    seed_path: str = ""

    def staking_config(self) -> StakingConfig:
        return StakingConfig(
            reward_ratio_numerator=self.reward_ratio_numerator,
            reward_ratio_denominator=self.reward_ratio_denominator,
            reward_interval=self.reward_interval,
            min_staking_period=self.min_staking_period,
            max_staking_period=self.max_staking_period,
            stake_unit=self.stake_unit,
            reward_unit=self.reward_unit,
        )


_ALLOWED_MODES = {"dev", "testnet", "prod"}


def validate_pool_config(cfg: PoolConfig) -> None:
    """Fail-fast validation for operator config."""

    for name in ("pool_id", "owner", "pool_account", "stake_unit", "reward_unit"):
        v = getattr(cfg, name)
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"{name} must be a non-empty string")

    mode = str(cfg.mode or "").strip().lower()
    if mode not in _ALLOWED_MODES:
        raise ValueError(f"mode must be one of {_ALLOWED_MODES}; got: {cfg.mode!r}")

    if int(cfg.api_port) <= 0 or int(cfg.api_port) > 65535:
        raise ValueError(f"api_port must be 1..65535; got: {cfg.api_port}")

    for name in (
        "reward_ratio_numerator",
        "reward_ratio_denominator",
        "reward_interval",
        "min_staking_period",
        "max_staking_period",
    ):
        if int(getattr(cfg, name)) <= 0:
            raise ValueError(f"{name} must be > 0; got: {getattr(cfg, name)}")

    # The owner is also the recipient of admin withdrawals; it must not be the pool itself.
    if cfg.owner.strip() == cfg.pool_account.strip():
        raise ValueError("owner must differ from pool_account")


def default_pool_config() -> PoolConfig:
    return PoolConfig(
        pool_id="stakepool-dev",
        owner=DEFAULT_OWNER_ID,
        mode="prod",
        pool_account=DEFAULT_POOL_ACCOUNT_ID,
        reward_ratio_numerator=DEFAULT_REWARD_RATIO_NUMERATOR,
        reward_ratio_denominator=DEFAULT_REWARD_RATIO_DENOMINATOR,
        reward_interval=DEFAULT_REWARD_INTERVAL,
        min_staking_period=DEFAULT_MIN_STAKING_PERIOD,
        max_staking_period=DEFAULT_MAX_STAKING_PERIOD,
        stake_unit=DEFAULT_STAKE_UNIT,
        reward_unit=DEFAULT_REWARD_UNIT,
        api_host="127.0.0.1",
        api_port=8080,
        log_level="INFO",
    )


def read_pool_config_file(path: str) -> PoolConfig:
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("pool config must be a JSON object")

    d = default_pool_config()

    cfg = PoolConfig(
        pool_id=_as_str(raw.get("pool_id"), d.pool_id),
        owner=_as_str(raw.get("owner"), d.owner),
        mode=_as_str(raw.get("mode"), d.mode),
        pool_account=_as_str(raw.get("pool_account"), d.pool_account),
        reward_ratio_numerator=_as_int(raw.get("reward_ratio_numerator"), d.reward_ratio_numerator),
        reward_ratio_denominator=_as_int(raw.get("reward_ratio_denominator"), d.reward_ratio_denominator),
        reward_interval=_as_int(raw.get("reward_interval"), d.reward_interval),
        min_staking_period=_as_int(raw.get("min_staking_period"), d.min_staking_period),
        max_staking_period=_as_int(raw.get("max_staking_period"), d.max_staking_period),
        stake_unit=_as_str(raw.get("stake_unit"), d.stake_unit),
        reward_unit=_as_str(raw.get("reward_unit"), d.reward_unit),
        api_host=_as_str(raw.get("api_host"), d.api_host),
        api_port=_as_int(raw.get("api_port"), d.api_port),
        log_level=_as_str(raw.get("log_level"), d.log_level),
        seed_path=_seed_path(raw.get("seed_path"), p),
    )

    validate_pool_config(cfg)
    return cfg


def load_pool_config(*, config_path: Optional[str] = None) -> PoolConfig:
    p = config_path or os.environ.get("STAKEPOOL_CONFIG_PATH")
    if p:
        return read_pool_config_file(p)

    cfg = default_pool_config()
    validate_pool_config(cfg)
    return cfg


__all__ = ["PoolConfig", "default_pool_config", "read_pool_config_file", "load_pool_config", "validate_pool_config"]
