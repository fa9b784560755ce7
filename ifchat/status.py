from __future__ import annotations

from ifchat.core.events import StatusMode


def format_status(mode: StatusMode, left: int, right: int) -> str:
    """Render the right-hand side of the status line.

    Score/moves games show e.g. "Score: 10 / Moves: 42"; time games show the
    clock as "9:05".
    """

    if mode == StatusMode.clock:
        return f"{left}:{right:02d}"
    return f"Score: {left} / Moves: {right}"
