from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class StatusMode(StrEnum):
    score_moves = "score_moves"
    clock = "clock"


@dataclass(frozen=True, slots=True)
class Output:
    """A chunk of engine text. May be a single character or a partial word."""

    text: str


@dataclass(frozen=True, slots=True)
class InputRequest:
    """The engine is suspended until resumed with a line of input."""

    max_length: int


@dataclass(frozen=True, slots=True)
class StatusUpdate:
    location: str
    left: int
    right: int
    mode: StatusMode = StatusMode.score_moves


@dataclass(frozen=True, slots=True)
class SaveRequest:
    """The engine wants `snapshot` persisted; resume with True/False."""

    snapshot: bytes


@dataclass(frozen=True, slots=True)
class RestoreRequest:
    """The engine wants its last snapshot back; resume with bytes or None."""


@dataclass(frozen=True, slots=True)
class Completed:
    pass


EngineEvent = Output | InputRequest | StatusUpdate | SaveRequest | RestoreRequest | Completed
