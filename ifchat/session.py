from __future__ import annotations

from dataclasses import dataclass

from ifchat.core.engine import EngineFault
from ifchat.core.events import StatusMode
from ifchat.models import SessionPhase


@dataclass(slots=True)
class Session:
    """Everything mutable about one running game.

    Owned by a single SessionController and thrown away on restart; a restarted
    game always starts from a fresh Session.
    """

    phase: SessionPhase = SessionPhase.running

    # Raw engine output since the last flush.
    pending_buffer: str = ""

    # Set after a successful save so the engine's own "Ok." is not shown twice.
    just_saved: bool = False

    # The opening copyright banner is replaced by our notices at most once.
    banner_shown: bool = False

    status_mode: StatusMode = StatusMode.score_moves
    status_left: int = 0
    status_right: int = 0
    location: str = ""

    # Phase underneath an active restart confirmation.
    resume_phase: SessionPhase | None = None

    # From the most recent InputRequest.
    max_input_length: int | None = None

    # A confirmed restart; the owner must build a new engine + session.
    restart_required: bool = False

    # Last engine fault, if the drive loop caught one.
    fault: EngineFault | None = None

    @property
    def awaiting_input(self) -> bool:
        return self.phase == SessionPhase.awaiting_input

    @property
    def awaiting_restart(self) -> bool:
        return self.phase == SessionPhase.awaiting_restart
