from __future__ import annotations

from typing import Any

from stakepool.runtime.errors import InvalidConfiguration, Unauthorized


def _as_id(x: Any) -> str:
    return x.strip() if isinstance(x, str) else ""


class OwnerGate:
    """Single-owner authorization gate for administrative calls."""

    def __init__(self, owner: str) -> None:
        o = _as_id(owner)
        if not o:
            raise InvalidConfiguration("owner_required", {"owner": owner})
        self._owner = o

    @property
    def owner(self) -> str:
        return self._owner

    def is_owner(self, caller: Any) -> bool:
        return _as_id(caller) == self._owner

    def require_owner(self, caller: Any) -> None:
        if not self.is_owner(caller):
            raise Unauthorized("owner_only", {"caller": _as_id(caller)})

    def transfer_ownership(self, caller: Any, new_owner: Any) -> str:
        """Hand the gate to `new_owner`. Returns the previous owner."""
        self.require_owner(caller)
        n = _as_id(new_owner)
        if not n:
            raise InvalidConfiguration("owner_required", {"owner": new_owner})
        prev = self._owner
        self._owner = n
        return prev


__all__ = ["OwnerGate"]
