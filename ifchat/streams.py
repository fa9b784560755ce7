from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, cast

import redis


@dataclass(frozen=True, slots=True)
class Transcript:
    game_id: str

    @property
    def key(self) -> str:
        return f"ifchat:transcript:{self.game_id}"


def publish_to_transcript(*, r: redis.Redis, transcript: Transcript, fields: Mapping[str, str]) -> str:
    """Append an entry to a game's transcript stream."""

    # redis-py stubs expect field/value unions; we only ever write string fields/values.
    stream_id = r.xadd(transcript.key, {str(k): str(v) for k, v in fields.items()})
    return cast(str, stream_id)


def read_transcript(*, r: redis.Redis, transcript: Transcript, count: int = 50) -> list[dict[str, str]]:
    """Return the last `count` entries, oldest first."""

    entries = r.xrevrange(transcript.key, count=count)
    return [dict(fields) for _, fields in reversed(entries)]


def clear_transcript(*, r: redis.Redis, transcript: Transcript) -> bool:
    """Drop a game's transcript stream. Returns True if there was one."""

    return bool(r.delete(transcript.key))
