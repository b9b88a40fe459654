# src/stakepool/ledger/registry.py
from __future__ import annotations

"""Position Registry.

Authoritative store of stake positions, keyed by (participant, position_id).

Layout:
  - positions[participant] is a growable list; the list index IS the position id
    (dense, zero-based, append-only, never compacted)
  - roster lists participants in first-opening order and is only used by the
    linear reporting scans

Positions are never removed. Closing only flips `is_active`.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from stakepool.ledger.types import StakePosition
from stakepool.runtime.errors import InactivePosition, InvalidAmount, InvalidId

Json = Dict[str, Any]


def _as_participant(x: Any) -> str:
    return x.strip() if isinstance(x, str) else ""


class PositionRegistry:
    def __init__(self) -> None:
        self._positions: Dict[str, List[StakePosition]] = {}
        self._roster: List[str] = []
        # running total of principal held by active positions
        self._active_amount = 0

    # ---- allocation / mutation ----

    def allocate(self, participant: str, amount: int, now: int) -> int:
        """Record a new active position and return its id."""
        p = _as_participant(participant)
        if not p:
            raise InvalidAmount("participant_required", {"participant": participant})
        amt = int(amount)
        if amt <= 0:
            raise InvalidAmount("amount_must_be_positive", {"amount": amt})

        book = self._positions.get(p)
        if book is None:
            book = []
            self._positions[p] = book
            self._roster.append(p)

        t = int(now)
        book.append(StakePosition(start_time=t, amount=amt, last_claimed_time=t))
        self._active_amount += amt
        return len(book) - 1

    def credit_rewards(self, participant: str, position_id: int, amount: int, now: int) -> StakePosition:
        pos = self._require_active(participant, position_id)
        pos.total_rewards = int(pos.total_rewards) + max(int(amount), 0)
        pos.last_claimed_time = max(int(now), int(pos.last_claimed_time))
        return pos

    def mark_closed(self, participant: str, position_id: int, now: int) -> StakePosition:
        pos = self._require_active(participant, position_id)
        pos.last_claimed_time = max(int(now), int(pos.last_claimed_time))
        pos.is_active = False
        self._active_amount -= int(pos.amount)
        return pos

    def _require_active(self, participant: str, position_id: int) -> StakePosition:
        pos = self.get(participant, position_id)
        if pos is None:
            raise InvalidId("position_not_found", {"participant": participant, "position_id": position_id})
        if not pos.is_active:
            raise InactivePosition("position_closed", {"participant": participant, "position_id": position_id})
        return pos

    # ---- lookups ----

    def get(self, participant: str, position_id: int) -> Optional[StakePosition]:
        book = self._positions.get(_as_participant(participant))
        if not book:
            return None
        # ids are plain ints; bool, float and numeric strings are not ids
        if isinstance(position_id, bool) or not isinstance(position_id, int):
            return None
        i = position_id
        if i < 0 or i >= len(book):
            return None
        pos = book[i]
        return pos if pos.exists else None

    def has_positions(self, participant: str) -> bool:
        return bool(self._positions.get(_as_participant(participant)))

    def position_count(self, participant: str) -> int:
        """Positions ever opened by `participant` (closed ones included)."""
        return len(self._positions.get(_as_participant(participant), ()))

    def iter_positions(self, participant: str) -> Iterator[Tuple[int, StakePosition]]:
        for i, pos in enumerate(self._positions.get(_as_participant(participant), ())):
            if pos.exists:
                yield i, pos

    def iter_all(self) -> Iterator[Tuple[str, int, StakePosition]]:
        """Every position of every roster participant. O(total positions ever opened)."""
        for p in self._roster:
            for i, pos in self.iter_positions(p):
                yield p, i, pos

    @property
    def roster(self) -> List[str]:
        return list(self._roster)

    @property
    def active_amount(self) -> int:
        return int(self._active_amount)

    def to_dict(self) -> Json:
        return {
            "roster": list(self._roster),
            "positions": {p: [pos.to_dict() for pos in book] for p, book in self._positions.items()},
        }


__all__ = ["PositionRegistry"]
