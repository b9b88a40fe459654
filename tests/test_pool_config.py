from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from stakepool.ledger.constants import DEFAULT_MIN_STAKING_PERIOD, DEFAULT_REWARD_INTERVAL
from stakepool.runtime.pool_boot import build_pool, build_units
from stakepool.runtime.pool_config import (
    default_pool_config,
    load_pool_config,
    read_pool_config_file,
    validate_pool_config,
)


def _write(tmp_path: Path, obj) -> str:
    p = tmp_path / "pool.json"
    p.write_text(json.dumps(obj), encoding="utf-8")
    return str(p)


def test_defaults_are_valid() -> None:
    cfg = default_pool_config()
    validate_pool_config(cfg)
    assert cfg.reward_interval == DEFAULT_REWARD_INTERVAL
    assert cfg.min_staking_period == DEFAULT_MIN_STAKING_PERIOD
    assert cfg.mode == "prod"


def test_file_values_override_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {"pool_id": "p1", "owner": "@ops", "mode": "dev", "reward_ratio_numerator": 3, "api_port": "9001"},
    )
    cfg = read_pool_config_file(path)
    assert cfg.pool_id == "p1"
    assert cfg.owner == "@ops"
    assert cfg.mode == "dev"
    assert cfg.reward_ratio_numerator == 3
    assert cfg.api_port == 9001
    assert cfg.reward_ratio_denominator == default_pool_config().reward_ratio_denominator


def test_env_path_is_honoured(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path, {"pool_id": "from-env"})
    monkeypatch.setenv("STAKEPOOL_CONFIG_PATH", path)
    assert load_pool_config().pool_id == "from-env"


def test_no_path_loads_defaults(monkeypatch) -> None:
    monkeypatch.delenv("STAKEPOOL_CONFIG_PATH", raising=False)
    assert load_pool_config() == default_pool_config()


@pytest.mark.parametrize(
    "bad",
    [
        {"mode": "staging"},
        {"api_port": 70000},
        {"reward_interval": 0},
        {"max_staking_period": -5},
        {"owner": "POOL", "pool_account": "POOL"},
    ],
)
def test_invalid_file_is_rejected(tmp_path: Path, bad) -> None:
    with pytest.raises(ValueError):
        read_pool_config_file(_write(tmp_path, bad))


def test_non_object_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        read_pool_config_file(_write(tmp_path, [1, 2, 3]))


def test_build_pool_shares_one_ledger_when_handles_match() -> None:
    cfg = replace(default_pool_config(), stake_unit="TOK", reward_unit="TOK")
    units = build_units(cfg)
    assert units.handles() == ["TOK"]

    pool = build_pool(cfg, units=units)
    assert pool.stake_token is pool.reward_token
    assert pool.owner == cfg.owner
    assert pool.pool_account == cfg.pool_account
    assert pool.config == cfg.staking_config()
