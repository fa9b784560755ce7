from __future__ import annotations

from contextlib import contextmanager

import redis


class SlotBusyError(RuntimeError):
    pass


def _lock_key(slot_key: str) -> str:
    return f"lock:{slot_key}"


@contextmanager
def slot_lock(*, r: redis.Redis, slot_key: str, ttl_ms: int = 5_000):
    """Best-effort exclusive hold on a save slot while it is being written.

    Single-holder only: the key is released unconditionally on exit, and the
    TTL frees it if the holder dies mid-write.
    """

    key = _lock_key(slot_key)
    acquired = r.set(key, "1", nx=True, px=ttl_ms)
    if not acquired:
        raise SlotBusyError(f"Save slot is busy: {slot_key}")
    try:
        yield
    finally:
        r.delete(key)
