from __future__ import annotations

from collections.abc import Generator
from typing import Protocol, runtime_checkable

from ifchat.core.events import (
    Completed,
    EngineEvent,
    InputRequest,
    Output,
    RestoreRequest,
    SaveRequest,
    StatusUpdate,
)

# What a suspended engine may be resumed with: a command line, a save result,
# restored snapshot bytes (or None when nothing could be restored).
ResumeValue = str | bool | bytes | None

_EVENT_TYPES = (Output, InputRequest, StatusUpdate, SaveRequest, RestoreRequest, Completed)


class EngineFault(RuntimeError):
    """Raised (or recorded) when a resume step of the engine blows up."""


@runtime_checkable
class EngineHandle(Protocol):
    """Suspended execution state of a running engine.

    `resume(value)` runs the engine until its next yield and returns that event.
    `value` is only meaningful on the first resume after an InputRequest,
    SaveRequest or RestoreRequest; everything else is resumed with None.
    """

    def resume(self, value: ResumeValue = None) -> EngineEvent:  # pragma: no cover - interface
        ...


class Engine(Protocol):
    def run(self) -> EngineHandle | Generator[EngineEvent, ResumeValue, None]:  # pragma: no cover - interface
        ...


class GeneratorHandle:
    """Adapt a generator-based engine to the explicit `resume` protocol.

    Running off the end of the generator is reported as `Completed()`, and so is
    every resume after that.
    """

    def __init__(self, gen: Generator[EngineEvent, ResumeValue, None]) -> None:
        self._gen = gen
        self._started = False
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def resume(self, value: ResumeValue = None) -> EngineEvent:
        if self._done:
            return Completed()

        try:
            if not self._started:
                # A just-started generator cannot be sent a value.
                self._started = True
                event = next(self._gen)
            else:
                event = self._gen.send(value)
        except StopIteration:
            self._done = True
            return Completed()

        if not isinstance(event, _EVENT_TYPES):
            raise EngineFault(f"Engine yielded an unknown event: {event!r}")
        if isinstance(event, Completed):
            self._done = True
        return event


def as_handle(started: object) -> EngineHandle:
    """Normalize whatever `Engine.run()` returned into an EngineHandle."""

    if isinstance(started, Generator):
        return GeneratorHandle(started)
    if isinstance(started, EngineHandle):
        return started
    raise ValueError(f"Engine.run() returned neither a generator nor a handle: {type(started).__name__}")
