from __future__ import annotations

import fakeredis
import pytest

from ifchat.save_store import (
    DecodeError,
    EncodeError,
    NotFound,
    PersistenceError,
    SaveStore,
    WriteError,
)


def test_round_trip_full_byte_range(store: SaveStore) -> None:
    snapshot = bytes(range(256)) + b"\x00\x00\xff\x00"
    size = store.save(snapshot)

    assert size == len(store.r.get(store.key))
    assert store.load() == snapshot


def test_round_trip_empty_snapshot(store: SaveStore) -> None:
    store.save(b"")
    assert store.load() == b""


def test_slot_is_text_encoded(store: SaveStore, r: fakeredis.FakeRedis) -> None:
    store.save(b"\x00\x01\x02")
    assert r.get("ifchat:save:test-game") == "AAEC"


def test_save_overwrites_previous_snapshot(store: SaveStore) -> None:
    store.save(b"first")
    store.save(b"second")
    assert store.load() == b"second"


def test_slots_are_keyed_by_game(r: fakeredis.FakeRedis) -> None:
    a = SaveStore(r=r, game_id="zork1")
    b = SaveStore(r=r, game_id="zork2")
    a.save(b"a")

    assert a.load() == b"a"
    with pytest.raises(NotFound):
        b.load()


def test_load_missing_slot_raises_not_found(store: SaveStore) -> None:
    with pytest.raises(NotFound):
        store.load()


def test_load_corrupt_slot_raises_decode_error(store: SaveStore, r: fakeredis.FakeRedis) -> None:
    r.set(store.key, "not base64!!")
    with pytest.raises(DecodeError):
        store.load()


def test_save_rejects_non_bytes(store: SaveStore) -> None:
    with pytest.raises(EncodeError):
        store.save("text")  # type: ignore[arg-type]


def test_save_while_slot_locked_is_a_write_error(store: SaveStore, r: fakeredis.FakeRedis) -> None:
    r.set(f"lock:{store.key}", "1")
    with pytest.raises(WriteError):
        store.save(b"data")
    assert not store.exists()


def test_lock_is_released_after_save(store: SaveStore, r: fakeredis.FakeRedis) -> None:
    store.save(b"one")
    assert r.get(f"lock:{store.key}") is None
    store.save(b"two")
    assert store.load() == b"two"


def test_clear_removes_slot_and_tolerates_absence(store: SaveStore) -> None:
    store.save(b"data")
    store.clear()
    assert not store.exists()
    store.clear()


def test_errors_share_a_base() -> None:
    for cls in (EncodeError, DecodeError, NotFound, WriteError):
        assert issubclass(cls, PersistenceError)


def test_try_save_converts_errors_to_results(store: SaveStore, r: fakeredis.FakeRedis) -> None:
    ok = store.try_save(b"abc")
    assert ok.ok is True
    assert ok.stored_bytes == 4

    r.set(f"lock:{store.key}", "1")
    failed = store.try_save(b"abc")
    assert failed.ok is False
    assert failed.error and "busy" in failed.error


def test_try_load_returns_none_on_failure(store: SaveStore, r: fakeredis.FakeRedis) -> None:
    assert store.try_load() is None
    r.set(store.key, "%%%")
    assert store.try_load() is None


def test_game_id_is_required(r: fakeredis.FakeRedis) -> None:
    with pytest.raises(ValueError):
        SaveStore(r=r, game_id=" ")
