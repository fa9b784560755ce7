from __future__ import annotations

import fakeredis
import pytest

from ifchat.presenters import TranscriptPresenter
from ifchat.save_store import SaveStore


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def store(r: fakeredis.FakeRedis) -> SaveStore:
    return SaveStore(r=r, game_id="test-game")


@pytest.fixture()
def presenter() -> TranscriptPresenter:
    return TranscriptPresenter()
