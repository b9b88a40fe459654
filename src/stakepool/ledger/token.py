# src/stakepool/ledger/token.py
from __future__ import annotations

"""Value-transfer primitive.

The pool only talks to units through `TokenBackend`. `TokenLedger` is an
in-memory reference backend (tests, dev service); anything with the same
three calls can be plugged in instead.

Contract:
  - balance_of has no side effects
  - transfer / transfer_from are all-or-nothing and report success as bool
"""

import threading
from typing import Callable, Dict, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class TokenBackend(Protocol):
    def balance_of(self, address: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...


TransferHook = Callable[[str, str, int], None]

_Snapshot = Tuple[Dict[str, int], Dict[Tuple[str, str], int], int]


class TokenLedger:
    """In-memory fungible unit with allowances.

    The receiver hook runs inside the transfer, under a re-entrant lock. If it
    raises, every balance, allowance and the supply go back to the state before
    the outer transfer, including moves the hook made itself.
    """

    def __init__(self, symbol: str) -> None:
        self.symbol = str(symbol)
        self._lock = threading.RLock()
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0
        # hook(from, to, amount), called after the move and before the transfer returns
        self.on_transfer: Optional[TransferHook] = None

    def mint(self, to: str, amount: int) -> None:
        amt = int(amount)
        if amt < 0:
            raise ValueError("mint amount must be >= 0")
        with self._lock:
            self._balances[to] = self._balances.get(to, 0) + amt
            self._total_supply += amt

    def balance_of(self, address: str) -> int:
        with self._lock:
            return int(self._balances.get(address, 0))

    def total_supply(self) -> int:
        with self._lock:
            return int(self._total_supply)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        amt = int(amount)
        if amt < 0:
            return False
        with self._lock:
            self._allowances[(owner, spender)] = amt
        return True

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return int(self._allowances.get((owner, spender), 0))

    def _snapshot_locked(self) -> _Snapshot:
        return dict(self._balances), dict(self._allowances), int(self._total_supply)

    def _restore_locked(self, snap: _Snapshot) -> None:
        balances, allowances, supply = snap
        self._balances = dict(balances)
        self._allowances = dict(allowances)
        self._total_supply = supply

    def _move_locked(self, src: str, dst: str, amt: int) -> bool:
        have = self._balances.get(src, 0)
        if amt < 0 or have < amt:
            return False
        self._balances[src] = have - amt
        self._balances[dst] = self._balances.get(dst, 0) + amt
        return True

    def _notify_locked(
        self, hook: Optional[TransferHook], snap: Optional[_Snapshot], src: str, dst: str, amt: int
    ) -> None:
        if hook is None or snap is None:
            return
        try:
            hook(src, dst, amt)
        except BaseException:
            self._restore_locked(snap)
            raise

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        amt = int(amount)
        hook = self.on_transfer
        with self._lock:
            snap = self._snapshot_locked() if hook is not None else None
            if not self._move_locked(sender, to, amt):
                return False
            self._notify_locked(hook, snap, sender, to, amt)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        amt = int(amount)
        hook = self.on_transfer
        with self._lock:
            allowed = self._allowances.get((owner, spender), 0)
            if amt < 0 or allowed < amt:
                return False
            snap = self._snapshot_locked() if hook is not None else None
            if not self._move_locked(owner, to, amt):
                return False
            self._allowances[(owner, spender)] = allowed - amt
            self._notify_locked(hook, snap, owner, to, amt)
        return True


class UnitRegistry:
    """Maps unit handles (config `stake_unit` / `reward_unit`) to backends."""

    def __init__(self, units: Optional[Dict[str, TokenBackend]] = None) -> None:
        self._units: Dict[str, TokenBackend] = dict(units or {})

    def register(self, handle: str, backend: TokenBackend) -> None:
        h = str(handle or "").strip()
        if not h:
            raise ValueError("unit handle must be non-empty")
        self._units[h] = backend

    def get(self, handle: str) -> TokenBackend:
        try:
            return self._units[handle]
        except KeyError:
            raise KeyError(f"unknown unit handle: {handle!r}") from None

    def __contains__(self, handle: object) -> bool:
        return handle in self._units

    def handles(self) -> list[str]:
        return sorted(self._units.keys())


__all__ = ["TokenBackend", "TokenLedger", "UnitRegistry", "TransferHook"]
