"""Short-lived data store with placeholder locks, keyed by hash."""

from __future__ import annotations

import threading
import time
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _now() -> float:
    return time.monotonic()


class DaItemLockStatus(Enum):
    """Outcome of trying to lock a key."""

    FAILED = "Failed"  # held by someone else
    LOCKED = "Locked"  # now held by the caller
    EXIST = "Exist"  # the data is already present


@dataclass
class DaItem:
    """A stored value, or a lock placeholder when ``raw`` is None."""

    raw: Any | None
    alive_secs: float
    dead_time: float = field(default=-1.0)

    def __post_init__(self) -> None:
        if self.dead_time < 0:
            self.dead_time = _now() + self.alive_secs

    @classmethod
    def locked(cls, lock_time: float) -> DaItem:
        """Return a placeholder that holds the key for ``lock_time`` seconds."""
        return cls(raw=None, alive_secs=lock_time)

    def touch(self) -> None:
        """Extend the lifetime by ``alive_secs`` from now."""
        self.dead_time = _now() + self.alive_secs

    def try_lock(self) -> DaItemLockStatus:
        """Refresh the item and report whether it holds data or a lock."""
        self.touch()
        return DaItemLockStatus.FAILED if self.raw is None else DaItemLockStatus.EXIST

    def is_dead(self) -> bool:
        return _now() > self.dead_time

    def get(self) -> Any | None:
        """Return the data if present and not expired."""
        if self.raw is None or self.is_dead():
            return None
        return self.raw


class DaManager:
    """Thread-safe map of keys to expiring items; dead items are purged on writes."""

    def __init__(self) -> None:
        self._data: dict[Hashable, DaItem] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def _clean(self) -> None:
        for key in [k for k, item in self._data.items() if item.is_dead()]:
            del self._data[key]

    def get(self, key: Hashable) -> Any | None:
        """Return the live data stored under ``key``, if any."""
        with self._lock:
            item = self._data.get(key)
            return None if item is None else item.get()

    def put(self, key: Hashable, raw: Any, alive_secs: float) -> None:
        """Store ``raw`` under ``key``, filling a lock placeholder if one is there."""
        new_item = DaItem(raw=raw, alive_secs=alive_secs)
        with self._lock:
            item = self._data.setdefault(key, new_item)
            if item.raw is None:
                item.raw = raw
            item.touch()
            self._clean()

    def try_lock(
        self, keys: Iterable[Hashable], alive_secs: float
    ) -> list[DaItemLockStatus]:
        """Try to lock each key; unknown keys get a placeholder and are locked."""
        statuses = []
        with self._lock:
            for key in keys:
                item = self._data.get(key)
                if item is None:
                    self._data[key] = DaItem.locked(alive_secs)
                    statuses.append(DaItemLockStatus.LOCKED)
                else:
                    statuses.append(item.try_lock())
            self._clean()
        return statuses