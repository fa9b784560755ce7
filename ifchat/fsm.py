from __future__ import annotations

from statemachine import State, StateMachine

from ifchat.models import SessionPhase
from ifchat.session import Session


class SessionFSM(StateMachine):
    """FSM wrapper around Session.

    - running -> awaiting_input when the engine asks for a line; back on resume.
    - running -> terminated when the engine completes.
    - restart can be requested from anywhere; declining returns to the phase underneath,
      confirming terminates the session for good.
    """

    running = State(SessionPhase.running.value, value=SessionPhase.running.value, initial=True)
    awaiting_input = State(SessionPhase.awaiting_input.value, value=SessionPhase.awaiting_input.value)
    awaiting_restart = State(SessionPhase.awaiting_restart.value, value=SessionPhase.awaiting_restart.value)
    terminated = State(SessionPhase.terminated.value, value=SessionPhase.terminated.value)

    input_requested = running.to(awaiting_input)
    resumed = awaiting_input.to(running)
    completed = running.to(terminated)

    restart_requested = (
        running.to(awaiting_restart)
        | awaiting_input.to(awaiting_restart)
        | terminated.to(awaiting_restart)
        | awaiting_restart.to.itself()
    )
    restart_confirmed = awaiting_restart.to(terminated)
    restart_declined = (
        awaiting_restart.to(awaiting_input, cond="underneath_awaiting_input")
        | awaiting_restart.to(running, cond="underneath_running")
        | awaiting_restart.to(terminated)
    )

    def __init__(self, session: Session):
        self.session = session
        super().__init__(start_value=session.phase.value)

    def underneath_awaiting_input(self) -> bool:
        return self.session.resume_phase == SessionPhase.awaiting_input

    def underneath_running(self) -> bool:
        return self.session.resume_phase == SessionPhase.running

    def before_restart_requested(self, source: State) -> None:
        # Re-asking while already confirming keeps the original phase underneath.
        if source.value != SessionPhase.awaiting_restart.value:
            self.session.resume_phase = SessionPhase(str(source.value))

    def after_restart_declined(self) -> None:
        self.session.resume_phase = None

    def after_restart_confirmed(self) -> None:
        self.session.resume_phase = None

    def sync_phase_to_model(self) -> None:
        self.session.phase = SessionPhase(str(self.current_state.value))
