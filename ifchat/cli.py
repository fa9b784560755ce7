"""
ifchat CLI - play an interactive fiction engine as a chat in the terminal.

Usage:
    ifchat play --engine mypkg.zmachine:create --story zork1.z3
    ifchat transcript --count 20

While playing, `/save` saves, `/restart` starts the restart dialog and `/quit`
(or EOF) leaves.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import TextIO

from dotenv import load_dotenv

from ifchat.controller import SessionController, start_session
from ifchat.core.engine import Engine
from ifchat.infra.redis_client import create_redis
from ifchat.models import Message, MessageKind, SessionPhase, StatusLine
from ifchat.presenters import Presenter, StreamPresenter
from ifchat.save_store import SaveStore
from ifchat.settings import settings_from_env
from ifchat.streams import Transcript, read_transcript

logger = logging.getLogger(__name__)

SAVE = "/save"
RESTART = "/restart"
QUIT = "/quit"
GAME_OVER_HINT = f"The game is over. Type {RESTART} to play again."


class ConsolePresenter:
    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out or sys.stdout

    def show(self, message: Message) -> None:
        # The player already sees what they typed.
        if message.kind == MessageKind.sent:
            return
        print(message.text, file=self.out)
        print(file=self.out)

    def show_status(self, status: StatusLine) -> None:
        print(f"[{status.location}] {status.text}", file=self.out)


def load_engine_factory(path: str) -> Callable[..., Engine]:
    """Resolve "package.module:callable" to the engine factory it names."""

    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Engine must look like 'module:factory', got {path!r}")

    module = importlib.import_module(module_name)
    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise ValueError(f"{module_name} has no callable {attr!r}")
    return factory


def engine_builder(factory: Callable[..., Engine], story: Path | None) -> Callable[[], Engine]:
    """A zero-argument callable that builds a brand-new engine each time (restart needs one)."""

    story_bytes = story.read_bytes() if story is not None else None

    def _build() -> Engine:
        if story_bytes is None:
            return factory()
        return factory(story_bytes)

    return _build


def run_console(
    *,
    new_engine: Callable[[], Engine],
    store: SaveStore,
    presenter: Presenter,
    lines: Iterable[str],
    save_command: str = "save",
) -> SessionController:
    """Feed `lines` to a session, recreating it after each confirmed restart.

    Returns the controller that was live when input ran out.
    """

    def _start() -> SessionController:
        return start_session(engine=new_engine(), store=store, presenter=presenter, save_command=save_command)

    controller = _start()
    for raw in lines:
        line = raw.strip()
        if line == QUIT:
            break
        if line == SAVE:
            controller.request_save()
        elif line == RESTART:
            controller.request_restart()
        elif line and controller.phase == SessionPhase.terminated:
            presenter.show(Message(text=GAME_OVER_HINT))
        else:
            controller.submit_command(line)

        if controller.restart_required:
            logger.info("Reinitializing session for %s", store.game_id)
            controller = _start()

    return controller


def _stdin_lines(prompt: str = "> ") -> Iterator[str]:
    while True:
        try:
            yield input(prompt)
        except EOFError:
            return


def cmd_play(args: argparse.Namespace) -> int:
    settings = settings_from_env(game_id=args.game_id, redis_url=args.redis_url)
    factory = load_engine_factory(args.engine)
    new_engine = engine_builder(factory, Path(args.story) if args.story else None)

    r = create_redis(settings.redis_url)
    try:
        store = SaveStore(r=r, game_id=settings.game_id)
        presenter = StreamPresenter(r=r, game_id=settings.game_id, inner=ConsolePresenter())
        try:
            run_console(
                new_engine=new_engine,
                store=store,
                presenter=presenter,
                lines=_stdin_lines(),
                save_command=settings.save_command,
            )
        except Exception as e:
            logger.exception("Game session for %s stopped", settings.game_id)
            print(f"Game session stopped: {e}", file=sys.stderr)
            return 1
    finally:
        r.close()
    return 0


def cmd_transcript(args: argparse.Namespace) -> int:
    settings = settings_from_env(game_id=args.game_id, redis_url=args.redis_url)
    r = create_redis(settings.redis_url)
    try:
        for entry in read_transcript(r=r, transcript=Transcript(game_id=settings.game_id), count=args.count):
            marker = ">" if entry.get("kind") == MessageKind.sent.value else " "
            print(f"{marker} {entry.get('text', '')}")
    finally:
        r.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ifchat", description="Interactive fiction as a chat")
    parser.add_argument("--game-id", help="Per-title identity for the save slot (env: IFCHAT_GAME_ID)")
    parser.add_argument("--redis-url", help="Redis connection URL (env: REDIS_URL)")
    subparsers = parser.add_subparsers(dest="command")

    play_parser = subparsers.add_parser("play", help="Start a game session")
    play_parser.add_argument("--engine", required=True, help="Engine factory as 'module:callable'")
    play_parser.add_argument("--story", help="Story file passed to the engine factory")

    transcript_parser = subparsers.add_parser("transcript", help="Print the stored chat transcript")
    transcript_parser.add_argument("--count", type=int, default=50, help="Number of entries to show")

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv(override=False)
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = settings_from_env()
    logging.basicConfig(level=settings.log_level.upper())

    if args.command == "play":
        return cmd_play(args)
    if args.command == "transcript":
        return cmd_transcript(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
