from __future__ import annotations

import logging

import redis

from ifchat.core.engine import Engine, EngineFault, EngineHandle, ResumeValue, as_handle
from ifchat.core.events import (
    Completed,
    InputRequest,
    Output,
    RestoreRequest,
    SaveRequest,
    StatusUpdate,
)
from ifchat.fsm import SessionFSM
from ifchat.models import Message, MessageKind, SessionPhase, StatusLine
from ifchat.presenters import Presenter
from ifchat.save_store import PersistenceError, SaveStore
from ifchat.session import Session
from ifchat.status import format_status
from ifchat.streams import Transcript, clear_transcript
from ifchat.text_buffer import TextAccumulator

logger = logging.getLogger(__name__)

RESTART_PROMPT = (
    "Start a new game? This will clear all progress and your save status. Say yes to begin again."
)
RESTARTING = "Restarting..."
CONTINUING = "Game continuing..."
GAME_OVER = "--- GAME OVER ---"
SAVE_NOT_READY = "Wait for a command prompt to save."
SAVED = "Game saved successfully"
RESTORED = "Game restored."
NOTHING_TO_RESTORE = "No saved game found."

_CONFIRM_WORDS = frozenset({"yes", "y"})


class SessionController:
    """Drives one engine handle on behalf of one Session.

    External events come in through `submit_command`, `request_save` and
    `request_restart`. Everything the player should see goes to `presenter`.
    Callers must not invoke these concurrently for the same controller.
    """

    def __init__(
        self,
        *,
        handle: EngineHandle,
        store: SaveStore,
        presenter: Presenter,
        session: Session | None = None,
        accumulator: TextAccumulator | None = None,
        save_command: str = "save",
    ) -> None:
        self.handle = handle
        self.store = store
        self.presenter = presenter
        self.session = session or Session()
        self.accumulator = accumulator or TextAccumulator()
        self.save_command = save_command
        self.fsm = SessionFSM(self.session)

    @property
    def phase(self) -> SessionPhase:
        return self.session.phase

    @property
    def restart_required(self) -> bool:
        return self.session.restart_required

    # ---- external events ----

    def submit_command(self, line: str) -> None:
        command = line.strip()
        if not command:
            return

        self._say(command, kind=MessageKind.sent)

        if self.session.awaiting_restart:
            self._answer_restart(command)
            return

        if not self.session.awaiting_input:
            logger.warning("Engine not ready for input (phase=%s); dropped %r", self.phase.value, command)
            return

        self._fire("resumed")
        self.drive(command + "\n")

    def request_save(self) -> None:
        if not self.session.awaiting_input:
            self._say(SAVE_NOT_READY)
            return

        self._say(self.save_command, kind=MessageKind.sent)
        self._fire("resumed")
        self.drive(self.save_command + "\n")

    def request_restart(self) -> None:
        self._fire("restart_requested")
        self._say(RESTART_PROMPT)

    # ---- engine driving ----

    def drive(self, resume_value: ResumeValue = None) -> None:
        """Resume the engine until it needs input or finishes.

        Only the first resume carries `resume_value`; save/restore requests feed
        their own result into the following resume.
        """

        if self.phase != SessionPhase.running:
            logger.warning("Not driving engine in phase %s", self.phase.value)
            return

        value = resume_value
        while True:
            try:
                event = self.handle.resume(value)
            except Exception as e:
                self._fault(e)
                return
            value = None

            if isinstance(event, Output):
                self.accumulator.append(self.session, event.text)
            elif isinstance(event, InputRequest):
                self.session.max_input_length = event.max_length
                self._fire("input_requested")
                self._flush()
                return
            elif isinstance(event, StatusUpdate):
                self._update_status(event)
            elif isinstance(event, SaveRequest):
                value = self._save(event.snapshot)
            elif isinstance(event, RestoreRequest):
                value = self._restore()
            elif isinstance(event, Completed):
                self._fire("completed")
                self._flush()
                self._say(GAME_OVER)
                return
            else:
                self._fault(EngineFault(f"Unexpected engine event: {event!r}"))
                return

    # ---- internals ----

    def _fault(self, e: Exception) -> None:
        logger.error("Engine fault", exc_info=e)
        fault = e if isinstance(e, EngineFault) else EngineFault(str(e))
        if fault is not e:
            fault.__cause__ = e
        self.session.fault = fault
        self._flush()
        self._say(f"Error: {e}")

    def _answer_restart(self, answer: str) -> None:
        if answer.casefold() in _CONFIRM_WORDS:
            try:
                self.store.clear()
            except PersistenceError as e:
                logger.warning("Could not clear save slot on restart: %s", e)
            try:
                clear_transcript(r=self.store.r, transcript=Transcript(game_id=self.store.game_id))
            except redis.RedisError as e:
                logger.warning("Could not clear transcript on restart: %s", e)
            self._say(RESTARTING)
            self._fire("restart_confirmed")
            self.session.restart_required = True
            logger.info("Restart confirmed for %s", self.store.game_id)
            return

        self._fire("restart_declined")
        self._say(CONTINUING)

    def _save(self, snapshot: bytes) -> bool:
        result = self.store.try_save(snapshot)
        if result.ok:
            self._say(SAVED)
            self.session.just_saved = True
            return True
        self._say(f"Save failed: {result.error}")
        return False

    def _restore(self) -> bytes | None:
        snapshot = self.store.try_load()
        self._say(RESTORED if snapshot is not None else NOTHING_TO_RESTORE)
        return snapshot

    def _update_status(self, event: StatusUpdate) -> None:
        s = self.session
        s.location = event.location
        s.status_mode = event.mode
        s.status_left = event.left
        s.status_right = event.right
        self.presenter.show_status(
            StatusLine(
                location=event.location,
                mode=event.mode,
                left=event.left,
                right=event.right,
                text=format_status(event.mode, event.left, event.right),
            )
        )

    def _flush(self) -> None:
        for segment in self.accumulator.flush(self.session):
            self._say(segment)

    def _say(self, text: str, *, kind: MessageKind = MessageKind.received) -> None:
        if not text.strip():
            return
        self.presenter.show(Message(kind=kind, text=text))

    def _fire(self, event: str) -> None:
        self.fsm.send(event)
        self.fsm.sync_phase_to_model()


def start_session(
    *,
    engine: Engine,
    store: SaveStore,
    presenter: Presenter,
    accumulator: TextAccumulator | None = None,
    save_command: str = "save",
) -> SessionController:
    """Start `engine` from scratch and drive it to its first input request."""

    controller = SessionController(
        handle=as_handle(engine.run()),
        store=store,
        presenter=presenter,
        accumulator=accumulator,
        save_command=save_command,
    )
    controller.drive()
    return controller
