"""Practice session: a shuffled deck walked one key at a time."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import readchar

from .lookup import LookupFailure, run_lookup
from .models import Term
from .terminal import Terminal

logger = logging.getLogger(__name__)

LookupFn = Callable[[str], str]

NEXT_KEYS = {readchar.key.RIGHT, "j"}
PREVIOUS_KEYS = {readchar.key.LEFT, "k"}
QUIT_KEYS = {"q"}
HANZI_KEYS = {"h"}
PINYIN_KEYS = {"p"}
SAVE_KEYS = {"s"}
LOOKUP_KEYS = {"!"}

KEY_HELP = "<-/k prev  ->/j next  p pinyin  h hanzi  s save  ! lookup  q quit"
CONTINUE_PROMPT = "Press any key to continue..."


class PracticeMode(Enum):
    """Which face of the current term is shown."""

    PINYIN = "pinyin"
    HANZI = "hanzi"


@dataclass(frozen=True)
class Completed:
    """The user quit the session normally."""


@dataclass(frozen=True)
class Aborted:
    """The session could not run."""

    reason: str


SessionOutcome = Completed | Aborted


class PracticeSession:
    """Interactive loop over referenced store terms.

    The session keeps its own shuffled list of references, so toggling
    ``saved`` updates the store while the store's ordering is untouched.
    """

    def __init__(
        self,
        label: str,
        terms: list[Term],
        *,
        terminal: Terminal,
        lookup: LookupFn = run_lookup,
        rng: random.Random | None = None,
    ) -> None:
        self.label = label
        self.terms = list(terms)
        self.terminal = terminal
        self.lookup = lookup
        self.rng = rng if rng is not None else random.Random()
        self.index = 0
        self.mode = PracticeMode.PINYIN

    @property
    def current(self) -> Term:
        return self.terms[self.index]

    def start(self) -> None:
        """Shuffle the deck and reset position and mode."""
        self.rng.shuffle(self.terms)
        self.index = 0
        self.mode = PracticeMode.PINYIN

    def advance(self) -> None:
        self.index = (self.index + 1) % len(self.terms)

    def retreat(self) -> None:
        self.index = (self.index + len(self.terms) - 1) % len(self.terms)

    def run(self) -> SessionOutcome:
        """Run the session until the user quits."""
        if not self.terms:
            logger.debug("Session %r has no terms", self.label)
            return Aborted(f"No terms found for {self.label}.")

        self.start()
        logger.debug("Session %r started with %d terms", self.label, len(self.terms))
        with self.terminal:
            while True:
                self.render()
                if not self.apply_key(self.terminal.read_key()):
                    break
        logger.debug("Session %r finished", self.label)
        return Completed()

    def apply_key(self, key: str) -> bool:
        """Apply one keypress; return False when the session should end."""
        if key in NEXT_KEYS:
            self.advance()
        elif key in PREVIOUS_KEYS:
            self.retreat()
        elif key in QUIT_KEYS:
            return False
        elif key in HANZI_KEYS:
            self.mode = PracticeMode.HANZI
        elif key in PINYIN_KEYS:
            self.mode = PracticeMode.PINYIN
        elif key in SAVE_KEYS:
            saved = self.current.toggle_saved()
            logger.debug("Term %s saved=%s", self.current.hanzi, saved)
        elif key in LOOKUP_KEYS:
            self.show_lookup()
        return True

    def header(self) -> str:
        return f"{self.label}  Term ({self.index + 1}/{len(self.terms)})  {KEY_HELP}"

    def body(self) -> str:
        term = self.current
        face = term.hanzi if self.mode is PracticeMode.HANZI else term.pinyin
        if term.saved:
            return f"{face}\n\n[saved]"
        return face

    def render(self) -> None:
        self.terminal.render_card(self.header(), self.body())

    def show_lookup(self) -> None:
        """Show lookup output for the current term with the terminal released."""
        term = self.current
        with self.terminal.suspended():
            try:
                output = self.lookup(term.hanzi).rstrip("\n")
            except LookupFailure as exc:
                logger.debug("Lookup for %s failed: %s", term.hanzi, exc)
                output = f"Lookup failed: {exc}"
            self.terminal.render_card(self.header(), f"{output}\n{CONTINUE_PROMPT}")
            self.terminal.read_key()
