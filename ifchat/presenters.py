from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import redis

from ifchat.models import Message, MessageKind, StatusLine
from ifchat.streams import Transcript, publish_to_transcript

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    """Where the controller sends everything the player should see."""

    def show(self, message: Message) -> None:  # pragma: no cover - interface
        ...

    def show_status(self, status: StatusLine) -> None:  # pragma: no cover - interface
        ...


@dataclass(slots=True)
class TranscriptPresenter:
    """Keeps messages in memory, in order."""

    messages: list[Message] = field(default_factory=list)
    status: StatusLine | None = None

    def show(self, message: Message) -> None:
        self.messages.append(message)

    def show_status(self, status: StatusLine) -> None:
        self.status = status

    def received(self) -> list[str]:
        return [m.text for m in self.messages if m.kind == MessageKind.received]

    def clear(self) -> None:
        self.messages.clear()


@dataclass(slots=True)
class StreamPresenter:
    """Appends every message to the game's Redis transcript stream, then forwards it."""

    r: redis.Redis
    game_id: str
    inner: Presenter | None = None

    def show(self, message: Message) -> None:
        try:
            publish_to_transcript(r=self.r, transcript=Transcript(game_id=self.game_id), fields=message.as_fields())
        except redis.RedisError as e:
            logger.warning("Transcript write failed for %s: %s", self.game_id, e)
        if self.inner is not None:
            self.inner.show(message)

    def show_status(self, status: StatusLine) -> None:
        if self.inner is not None:
            self.inner.show_status(status)
