from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

_locks_guard = threading.Lock()
_asset_locks: dict[str, threading.Lock] = {}


@contextmanager
def asset_lock(asset_id: str) -> Iterator[None]:
    """Serialize availability read-then-write for one asset.

    Callers check the asset exists before taking the lock so ids that were
    never stored do not get an entry.
    """
    with _locks_guard:
        lock = _asset_locks.setdefault(asset_id, threading.Lock())
    with lock:
        yield


def forget_asset_lock(asset_id: str) -> None:
    """Drop the entry of a deleted asset."""
    with _locks_guard:
        _asset_locks.pop(asset_id, None)


def tracked_asset_ids() -> set[str]:
    with _locks_guard:
        return set(_asset_locks)
