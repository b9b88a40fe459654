from __future__ import annotations

"""Append-only notification log.

One entry per successful mutating operation, appended after the state change.
Rejected calls never append.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

Json = Dict[str, Any]

STAKED = "Staked"
UNSTAKED = "Unstaked"
CLAIMED = "Claimed"
PAUSED = "Paused"
UNPAUSED = "Unpaused"
CONFIG_CHANGED = "ConfigChanged"
OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
ADMIN_WITHDRAWN = "AdminWithdrawn"


@dataclass(frozen=True, slots=True)
class Event:
    seq: int
    name: str
    fields: Json = field(default_factory=dict)

    def to_dict(self) -> Json:
        return {"seq": int(self.seq), "event": self.name, **self.fields}


class EventLog:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: List[Event] = []

    def emit(self, name: str, **fields: Any) -> Event:
        with self._lock:
            ev = Event(seq=len(self._events), name=str(name), fields=dict(fields))
            self._events.append(ev)
        return ev

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def all(self, name: Optional[str] = None) -> List[Event]:
        with self._lock:
            evs = list(self._events)
        if name is None:
            return evs
        return [e for e in evs if e.name == name]

    def tail(self, limit: int = 50) -> List[Event]:
        n = max(int(limit), 0)
        with self._lock:
            return list(self._events[-n:]) if n else []


__all__ = [
    "Event",
    "EventLog",
    "STAKED",
    "UNSTAKED",
    "CLAIMED",
    "PAUSED",
    "UNPAUSED",
    "CONFIG_CHANGED",
    "OWNERSHIP_TRANSFERRED",
    "ADMIN_WITHDRAWN",
]
