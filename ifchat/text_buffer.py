from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ifchat.session import Session

logger = logging.getLogger(__name__)

# The engine's "ready for input" prompt, optionally on its own line.
_PROMPT_RE = re.compile(r"\n?>\s*\Z")

# "Serial number 840726" followed by one or more line breaks ends the opening banner.
_SERIAL_RE = re.compile(r"Serial number \d{6}(?:[ \t\r\f\v]*\n)+")

SAVE_ACKNOWLEDGEMENT = "Ok."

DEFAULT_BANNER_NOTICES: tuple[str, str] = (
    "ZORK I: The Great Underground Empire\n"
    "Original game © 1981-1986 Infocom, Inc. All rights reserved.\n"
    "ZORK is a registered trademark of Infocom, Inc.",
    "Source code used under MIT License (Microsoft, 2025).\n"
    "Unofficial fan project. Not affiliated with or endorsed by trademark holders.",
)


def strip_prompt(text: str) -> str:
    return _PROMPT_RE.sub("", text)


def find_banner_split(text: str) -> tuple[int, int] | None:
    """Locate the serial-number line that closes the opening banner.

    Returns the (start, end) span of the match; `end` is where the game text
    proper begins. None if the text has no such line.
    """

    match = _SERIAL_RE.search(text)
    if match is None:
        return None
    return match.start(), match.end()


def _display_text(text: str) -> str:
    # Drop leading blank lines and trailing whitespace, keep first-line indentation.
    stripped = text.rstrip()
    lines = stripped.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    return "\n".join(lines)


class TextAccumulator:
    """Collects engine output into the session buffer and cleans it up on flush."""

    def __init__(self, *, banner_notices: Sequence[str] = DEFAULT_BANNER_NOTICES) -> None:
        self.banner_notices = tuple(banner_notices)

    def append(self, session: Session, text: str) -> None:
        session.pending_buffer += text

    def flush(self, session: Session) -> list[str]:
        """Empty the buffer and return the display segments it produced (possibly none)."""

        text = strip_prompt(session.pending_buffer)
        session.pending_buffer = ""

        if session.just_saved:
            session.just_saved = False
            # Only a bare acknowledgement is suppressed; anything bundled with it is shown.
            if text.strip() == SAVE_ACKNOWLEDGEMENT:
                logger.debug("Suppressed save acknowledgement")
                return []

        if not text.strip():
            return []

        if not session.banner_shown:
            span = find_banner_split(text)
            if span is not None:
                session.banner_shown = True
                segments = [n for n in self.banner_notices if n.strip()]
                remainder = text[span[1]:].strip()
                if remainder:
                    segments.append(remainder)
                return segments

        return [_display_text(text)]
