from __future__ import annotations

import io

import fakeredis
import pytest

from ifchat.cli import GAME_OVER_HINT, ConsolePresenter, build_parser, load_engine_factory, run_console
from ifchat.controller import GAME_OVER, RESTART_PROMPT, RESTARTING, SAVED
from ifchat.core.events import InputRequest, Output, SaveRequest
from ifchat.models import Message, MessageKind, SessionPhase, StatusLine
from ifchat.presenters import TranscriptPresenter
from ifchat.save_store import SaveStore


class _EchoEngine:
    def run(self):  # type: ignore[no-untyped-def]
        yield Output("Welcome\n>")
        while True:
            line = yield InputRequest(80)
            if line.strip() == "save":
                yield SaveRequest(b"snap")
                yield Output("Ok.\n>")
            else:
                yield Output(f"You typed {line.strip()}.\n>")


def test_run_console_plays_saves_and_restarts(store: SaveStore, presenter: TranscriptPresenter) -> None:
    built: list[_EchoEngine] = []

    def _new_engine() -> _EchoEngine:
        built.append(_EchoEngine())
        return built[-1]

    controller = run_console(
        new_engine=_new_engine,
        store=store,
        presenter=presenter,
        lines=["look", "/save", "/restart", "yes", "again", "/quit", "ignored"],
    )

    assert len(built) == 2
    assert presenter.received() == [
        "Welcome",
        "You typed look.",
        SAVED,
        RESTART_PROMPT,
        RESTARTING,
        "Welcome",
        "You typed again.",
    ]
    assert controller.phase == SessionPhase.awaiting_input
    assert not store.exists()


def test_run_console_keeps_save_when_restart_declined(store: SaveStore, presenter: TranscriptPresenter) -> None:
    controller = run_console(
        new_engine=_EchoEngine,
        store=store,
        presenter=presenter,
        lines=["/save", "/restart", "no"],
    )

    assert store.load() == b"snap"
    assert controller.phase == SessionPhase.awaiting_input
    assert GAME_OVER not in presenter.received()


def test_console_presenter_prints_received_only() -> None:
    out = io.StringIO()
    p = ConsolePresenter(out)

    p.show(Message(kind=MessageKind.sent, text="look"))
    p.show(Message(text="West of House"))
    p.show_status(StatusLine(location="West of House", text="Score: 0 / Moves: 1"))

    assert out.getvalue() == "West of House\n\n[West of House] Score: 0 / Moves: 1\n"


def test_load_engine_factory_resolves_callables() -> None:
    factory = load_engine_factory("ifchat.status:format_status")
    assert callable(factory)


@pytest.mark.parametrize("path", ["ifchat.status", "ifchat.status:", ":run", "ifchat.status:nope"])
def test_load_engine_factory_rejects_bad_paths(path: str) -> None:
    with pytest.raises(ValueError):
        load_engine_factory(path)


def test_parser_requires_engine_for_play() -> None:
    parser = build_parser()
    args = parser.parse_args(["--game-id", "zork2", "play", "--engine", "pkg.mod:make", "--story", "z.z3"])
    assert (args.command, args.game_id, args.engine, args.story) == ("play", "zork2", "pkg.mod:make", "z.z3")

    with pytest.raises(SystemExit):
        parser.parse_args(["play"])


class _ShortEngine:
    def run(self):  # type: ignore[no-untyped-def]
        yield Output("You are in a dark room.\n>")
        yield InputRequest(80)
        yield Output("You have been eaten by a grue.\n")


def test_run_console_points_to_restart_after_game_over(store: SaveStore, presenter: TranscriptPresenter) -> None:
    controller = run_console(
        new_engine=_ShortEngine,
        store=store,
        presenter=presenter,
        lines=["wait", "north"],
    )

    assert presenter.received()[-2:] == [GAME_OVER, GAME_OVER_HINT]
    assert controller.phase == SessionPhase.terminated
