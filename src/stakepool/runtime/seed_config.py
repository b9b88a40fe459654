# src/stakepool/runtime/seed_config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from stakepool.ledger.token import TokenLedger, UnitRegistry

Json = Dict[str, Any]


@dataclass(frozen=True, slots=True)
class SeedAllocation:
    unit: str
    account: str
    amount: int
    # allowance granted to the pool account, so the holder can stake right away
    approve_pool: int = 0


@dataclass(frozen=True, slots=True)
class SeedConfig:
    allocations: List[SeedAllocation]


def _non_negative(v: Any, name: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int) or v < 0:
        raise ValueError(f"{name} must be a non-negative integer; got: {v!r}")
    return v


def parse_seed(obj: Any) -> SeedConfig:
    """Build a SeedConfig from a decoded JSON object.

    Shape:
      { "allocations": [ { "unit": "STK", "account": "@alice", "amount": 1000, "approve_pool": 1000 },
                         { "unit": "RWD", "account": "POOL", "amount": 100000 } ] }
    """
    if not isinstance(obj, dict):
        raise ValueError("seed config must be a JSON object")

    raw = obj.get("allocations")
    if raw is None:
        raw = []
    if not isinstance(raw, list):
        raise ValueError("allocations must be a list")

    out: List[SeedAllocation] = []
    for i, rec in enumerate(raw):
        if not isinstance(rec, dict):
            raise ValueError(f"allocations[{i}] must be an object")
        unit = str(rec.get("unit") or "").strip()
        account = str(rec.get("account") or "").strip()
        if not unit or not account:
            raise ValueError(f"allocations[{i}] needs unit and account")
        out.append(
            SeedAllocation(
                unit=unit,
                account=account,
                amount=_non_negative(rec.get("amount", 0), f"allocations[{i}].amount"),
                approve_pool=_non_negative(rec.get("approve_pool", 0), f"allocations[{i}].approve_pool"),
            )
        )
    return SeedConfig(allocations=out)


def load_seed(path: str) -> SeedConfig:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(str(p))
    with p.open("r", encoding="utf-8") as f:
        return parse_seed(json.load(f))


def resolve_seed_path(configured: str = "") -> Optional[str]:
    """Configured path wins; STAKEPOOL_SEED_PATH is the fallback."""
    p = (configured or os.environ.get("STAKEPOOL_SEED_PATH") or "").strip()
    return p or None


def apply_seed_to_units(units: UnitRegistry, seed: SeedConfig, *, pool_account: str) -> Json:
    """Mint seed balances and grant pool allowances on fresh in-memory units.

    Only applies to units with zero supply, so re-running on a live backend
    never mints twice. Returns {unit: minted_total} for the units it touched.
    """
    fresh: Dict[str, bool] = {}
    minted: Json = {}
    for a in seed.allocations:
        if a.unit not in units:
            raise ValueError(f"seed allocation for unknown unit: {a.unit!r}")
        ledger = units.get(a.unit)
        if not isinstance(ledger, TokenLedger):
            raise ValueError(f"unit {a.unit!r} is not an in-memory ledger; seed it at its source")

        if a.unit not in fresh:
            fresh[a.unit] = ledger.total_supply() == 0
        if not fresh[a.unit]:
            continue

        if a.amount:
            ledger.mint(a.account, a.amount)
            minted[a.unit] = int(minted.get(a.unit, 0)) + a.amount
        if a.approve_pool:
            ledger.approve(a.account, pool_account, ledger.allowance(a.account, pool_account) + a.approve_pool)
    return minted


__all__ = ["SeedAllocation", "SeedConfig", "parse_seed", "load_seed", "resolve_seed_path", "apply_seed_to_units"]
