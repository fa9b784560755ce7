from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from ifchat.core.events import StatusMode


class SessionPhase(StrEnum):
    running = "running"
    awaiting_input = "awaiting_input"
    awaiting_restart = "awaiting_restart"
    terminated = "terminated"


class MessageKind(StrEnum):
    # Engine/system text shown to the player.
    received = "received"
    # Echo of what the player typed or clicked.
    sent = "sent"


class Message(BaseModel):
    kind: MessageKind = MessageKind.received
    text: str = Field(..., min_length=1)

    def as_fields(self) -> dict[str, str]:
        return {"kind": self.kind.value, "text": self.text}


class StatusLine(BaseModel):
    location: str = ""
    mode: StatusMode = StatusMode.score_moves
    left: int = 0
    right: int = 0

    # Display-ready rendering of left/right (see ifchat.status.format_status).
    text: str = ""
