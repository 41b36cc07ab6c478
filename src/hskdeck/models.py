"""Vocabulary tree: levels contain missions, missions contain terms."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class Term:
    """One vocabulary card with a pinyin face and a hanzi face.

    Terms compare by identity: practice sessions hold references into the
    store and toggle ``saved`` in place.
    """

    pinyin: str
    hanzi: str
    saved: bool = False

    def toggle_saved(self) -> bool:
        """Flip the saved flag and return its new value."""
        self.saved = not self.saved
        return self.saved


@dataclass(frozen=True)
class Mission:
    """Ordered lesson of terms inside a level."""

    id: int
    terms: list[Term] = field(default_factory=list)


@dataclass(frozen=True)
class Level:
    """Top-level HSK proficiency grouping."""

    id: int
    missions: list[Mission] = field(default_factory=list)
