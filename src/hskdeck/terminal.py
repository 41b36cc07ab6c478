"""Raw-mode terminal handling and centered card rendering."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TextIO

import readchar
from rich.cells import cell_len

if sys.platform != "win32":
    import termios
    import tty

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\x1b[2J"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"

SizeFn = Callable[[], tuple[int, int]]


def move_to(x: int, y: int) -> str:
    """Return the escape sequence placing the cursor at zero-based column/row."""
    return f"\x1b[{y + 1};{x + 1}H"


def display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""
    return cell_len(text)


def layout(lines: list[str], width: int, height: int) -> list[tuple[int, int, str]]:
    """Place lines centered in a width x height screen as (x, y, line) rows.

    Offsets clamp at zero when the text is larger than the screen.
    """
    start_y = max(0, (height - len(lines)) // 2)
    return [
        (max(0, (width - display_width(line)) // 2), start_y + offset, line)
        for offset, line in enumerate(lines)
    ]


class Terminal:
    """Raw input mode plus hidden cursor, held as one scoped resource."""

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        size_fn: SizeFn | None = None,
        read_key_fn: Callable[[], str] = readchar.readkey,
    ) -> None:
        self._in = stdin if stdin is not None else sys.stdin
        self._out = stdout if stdout is not None else sys.stdout
        self._size_fn = size_fn
        self._read_key_fn = read_key_fn
        self._saved_attrs: list | None = None
        self.active = False

    def __enter__(self) -> Terminal:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def acquire(self) -> None:
        """Enter raw mode and hide the cursor."""
        if self.active:
            return
        if sys.platform != "win32" and self._in.isatty():
            fd = self._in.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setraw(fd)
        self._write(HIDE_CURSOR)
        self.active = True
        logger.debug("Terminal acquired")

    def release(self) -> None:
        """Show the cursor and restore the original tty attributes."""
        if not self.active:
            return
        self.active = False
        try:
            self._write(SHOW_CURSOR)
        finally:
            if self._saved_attrs is not None:
                termios.tcsetattr(self._in.fileno(), termios.TCSADRAIN, self._saved_attrs)
                self._saved_attrs = None
        logger.debug("Terminal released")

    @contextmanager
    def suspended(self) -> Iterator[Terminal]:
        """Fully release the terminal for the duration of the block."""
        was_active = self.active
        self.release()
        try:
            yield self
        finally:
            if was_active:
                self.acquire()

    def size(self) -> tuple[int, int]:
        """Return the current (columns, rows); failures propagate."""
        if self._size_fn is not None:
            return self._size_fn()
        columns, rows = os.get_terminal_size(self._out.fileno())
        return columns, rows

    def read_key(self) -> str:
        """Block until exactly one keypress is available."""
        return self._read_key_fn()

    def render_card(self, header: str, body: str) -> None:
        """Clear the screen, draw the header top-left and center the body."""
        width, height = self.size()
        parts = [CLEAR_SCREEN, move_to(0, 0), header]
        for x, y, line in layout(body.split("\n"), width, height):
            parts.append(move_to(x, y))
            parts.append(line)
        self._write("".join(parts))

    def _write(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()
