"""CLI entrypoint for HSK flashcard practice."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Callable
from functools import partial

from . import __version__
from .config import Settings, configure_logging, load_settings
from .lookup import run_lookup
from .navigation import (
    MenuOption,
    NavigationStack,
    ParseFailure,
    Pop,
    Practice,
    Push,
    Quit,
    list_options,
    parse_choice,
    resolve,
)
from .session import Aborted, PracticeSession, SessionOutcome
from .store import StoreLoadError, TermStore, load_store, save_store
from .terminal import Terminal

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
TerminalFactory = Callable[[], Terminal]


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="hskdeck", description="HSK vocabulary flashcard practice")
    parser.add_argument("--storage", help="vocabulary JSON document (default: practice_sheet.json)")
    parser.add_argument("--lookup-command", help="dictionary tool run with a term as its argument (default: hskindex)")
    parser.add_argument(
        "--return-to-menu",
        action="store_true",
        help="show the menu again after a practice session instead of exiting",
    )
    parser.add_argument("--log-file", help="write debug logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)
    settings = load_settings(
        os.environ,
        storage=args.storage,
        lookup_command=args.lookup_command,
        return_to_menu=args.return_to_menu,
        log_file=args.log_file,
    )
    configure_logging(settings.log_file)
    return play_shell(settings)


def play_shell(
    settings: Settings,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    terminal_factory: TerminalFactory = Terminal,
) -> int:
    """Load the store, run the menu, and persist saved flags on normal exit."""
    try:
        store = load_store(settings.storage_path)
    except StoreLoadError as exc:
        print_fn(f"Could not load {settings.storage_path}: {exc}")
        return 1

    _menu_loop(store, settings, input_fn, print_fn, terminal_factory)

    try:
        save_store(store, settings.storage_path)
    except OSError as exc:
        print_fn(f"Could not save {settings.storage_path}: {exc}")
        return 1
    return 0


def _menu_loop(
    store: TermStore,
    settings: Settings,
    input_fn: InputFn,
    print_fn: PrintFn,
    terminal_factory: TerminalFactory,
) -> None:
    """Drive level and mission menus until Exit or a finished practice session."""
    stack = NavigationStack()
    while True:
        state = stack.current
        option = _select_option(state.title(), list_options(state, store), input_fn, print_fn)
        if option is None:
            return
        try:
            action = resolve(option, store)
        except ParseFailure as exc:
            print_fn(f"Invalid choice. {exc}")
            continue

        if isinstance(action, Quit):
            return
        if isinstance(action, Pop):
            stack.pop()
        elif isinstance(action, Push):
            stack.push(action.state)
        elif isinstance(action, Practice):
            outcome = _practice(action, settings, terminal_factory)
            if isinstance(outcome, Aborted):
                print_fn(outcome.reason)
            if not settings.return_to_menu:
                return


def _select_option(title: str, options: list[MenuOption], input_fn: InputFn, print_fn: PrintFn) -> MenuOption | None:
    """Prompt until one option is chosen; None when input is closed."""
    while True:
        print_fn(f"\n=== {title} ===")
        for idx, option in enumerate(options, start=1):
            print_fn(f"{idx}) {option.label}")
        try:
            choice = input_fn("Choose (number or name): ")
        except EOFError:
            return None
        selected = parse_choice(choice, options)
        if selected is not None:
            return selected
        print_fn("Invalid choice.")


def _practice(action: Practice, settings: Settings, terminal_factory: TerminalFactory) -> SessionOutcome:
    """Run one practice session over the selected terms."""
    session = PracticeSession(
        action.label,
        action.terms,
        terminal=terminal_factory(),
        lookup=partial(run_lookup, command=settings.lookup_command),
    )
    outcome = session.run()
    logger.debug("Practice %r ended with %s", action.label, outcome)
    return outcome


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
