from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

import redis

from ifchat.lock import SlotBusyError, slot_lock

logger = logging.getLogger(__name__)

SAVE_KEY_PREFIX = "ifchat:save:"  # + {game_id}


class PersistenceError(RuntimeError):
    pass


class EncodeError(PersistenceError):
    pass


class DecodeError(PersistenceError):
    pass


class NotFound(PersistenceError):
    pass


class WriteError(PersistenceError):
    pass


def _save_key(game_id: str) -> str:
    return f"{SAVE_KEY_PREFIX}{game_id}"


@dataclass(frozen=True, slots=True)
class SaveResult:
    ok: bool
    stored_bytes: int = 0
    error: str | None = None


class SaveStore:
    """One persisted engine snapshot per game, base64 text in a Redis string key.

    Snapshots are opaque: only the engine version that wrote one can use it.
    """

    def __init__(self, *, r: redis.Redis, game_id: str) -> None:
        if not game_id.strip():
            raise ValueError("game_id is required")
        self.r = r
        self.game_id = game_id

    @property
    def key(self) -> str:
        return _save_key(self.game_id)

    def save(self, snapshot: bytes) -> int:
        """Overwrite the slot with `snapshot`; returns the stored (encoded) size."""

        if not isinstance(snapshot, (bytes, bytearray, memoryview)):
            raise EncodeError(f"Snapshot must be bytes, got {type(snapshot).__name__}")

        encoded = base64.b64encode(bytes(snapshot)).decode("ascii")

        try:
            with slot_lock(r=self.r, slot_key=self.key):
                self.r.set(self.key, encoded)
        except SlotBusyError as e:
            raise WriteError(str(e)) from e
        except redis.RedisError as e:
            raise WriteError(f"Could not write save slot: {e}") from e

        logger.info("Saved %d snapshot bytes to %s", len(snapshot), self.key)
        return len(encoded)

    def load(self) -> bytes:
        try:
            raw = self.r.get(self.key)
        except redis.RedisError as e:
            raise PersistenceError(f"Could not read save slot: {e}") from e

        if raw is None:
            raise NotFound(f"No saved game in {self.key}")

        try:
            return base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Save slot {self.key} is corrupt: {e}") from e

    def exists(self) -> bool:
        return bool(self.r.exists(self.key))

    def clear(self) -> None:
        # DEL on a missing key is a no-op, so clearing twice is fine.
        try:
            self.r.delete(self.key)
        except redis.RedisError as e:
            raise WriteError(f"Could not clear save slot: {e}") from e
        logger.info("Cleared save slot %s", self.key)

    def try_save(self, snapshot: bytes) -> SaveResult:
        try:
            size = self.save(snapshot)
        except PersistenceError as e:
            logger.warning("Save failed: %s", e)
            return SaveResult(ok=False, error=str(e))
        return SaveResult(ok=True, stored_bytes=size)

    def try_load(self) -> bytes | None:
        try:
            return self.load()
        except PersistenceError as e:
            logger.warning("Restore failed: %s", e)
            return None
