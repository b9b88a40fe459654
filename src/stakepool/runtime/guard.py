from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from stakepool.runtime.errors import ReentrantCall


class ReentrancyGuard:
    """
    Single-writer guard around the whole ledger.

    - other threads block until the holder finishes (serialized writers)
    - re-entry from the holding thread (e.g. a transfer callback calling
      back into the pool) is rejected with ReentrantCall
    - always released on exit, including error paths
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holder: Optional[int] = None
        self._op: str = ""

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    def acquire(self, op: str = "") -> None:
        me = threading.get_ident()
        if self._holder == me:
            raise ReentrantCall("ledger_operation_in_progress", {"op": op, "holding_op": self._op})
        self._lock.acquire()
        self._holder = me
        self._op = str(op)

    def release(self) -> None:
        self._holder = None
        self._op = ""
        self._lock.release()

    @contextmanager
    def hold(self, op: str = "") -> Iterator[None]:
        self.acquire(op)
        try:
            yield
        finally:
            self.release()


__all__ = ["ReentrancyGuard"]
