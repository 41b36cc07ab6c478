"""Menu states, option listing, and selection resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import Term
from .store import TermStore

logger = logging.getLogger(__name__)


class ParseFailure(ValueError):
    """Raised when a selected option does not map to a store position."""


@dataclass(frozen=True)
class AtLevelSelection:
    """Root menu listing HSK levels."""

    def title(self) -> str:
        return "HSK Level Selection"


@dataclass(frozen=True)
class AtMissionSelection:
    """Mission menu for one level."""

    level: str

    def title(self) -> str:
        return f"Missions for HSK Level: {self.level}"


NavigationState = AtLevelSelection | AtMissionSelection


class NavigationStack:
    """Stack of menu states whose floor is always level selection."""

    def __init__(self) -> None:
        self._states: list[NavigationState] = [AtLevelSelection()]

    @property
    def current(self) -> NavigationState:
        return self._states[-1]

    @property
    def depth(self) -> int:
        return len(self._states)

    def push(self, state: NavigationState) -> None:
        logger.debug("Navigate into %s", state)
        self._states.append(state)

    def pop(self) -> NavigationState:
        """Leave the current menu; popping the root menu leaves it in place."""
        if len(self._states) > 1:
            left = self._states.pop()
            logger.debug("Navigate back from %s", left)
        return self._states[-1]


@dataclass(frozen=True)
class BackOption:
    label: str = "<< Back"


@dataclass(frozen=True)
class ExitOption:
    label: str = "Exit"


@dataclass(frozen=True)
class SavedTermsOption:
    label: str = "Saved Terms"


@dataclass(frozen=True)
class LevelOption:
    label: str


@dataclass(frozen=True)
class MissionOption:
    label: str
    level: str


MenuOption = BackOption | ExitOption | SavedTermsOption | LevelOption | MissionOption


@dataclass(frozen=True)
class Push:
    state: NavigationState


@dataclass(frozen=True)
class Pop:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Practice:
    """Hand off to a practice session over referenced store terms."""

    label: str
    terms: list[Term]


NavigationAction = Push | Pop | Quit | Practice


def list_options(state: NavigationState, store: TermStore) -> list[MenuOption]:
    """Return the ordered options shown for a menu state."""
    options: list[MenuOption]
    if isinstance(state, AtMissionSelection):
        level = store.level(_position(state.level, len(store.levels), "level"))
        options = [MissionOption(label=str(mission.id), level=state.level) for mission in level.missions]
        options.append(BackOption())
    else:
        options = [LevelOption(label=str(level.id)) for level in store.levels]
        options.append(SavedTermsOption())
    options.append(ExitOption())
    return options


def resolve(option: MenuOption, store: TermStore) -> NavigationAction:
    """Interpret a chosen option as a navigation or practice action."""
    if isinstance(option, BackOption):
        return Pop()
    if isinstance(option, ExitOption):
        return Quit()
    if isinstance(option, LevelOption):
        level_id = _position(option.label, len(store.levels), "level")
        return Push(AtMissionSelection(level=str(level_id)))
    if isinstance(option, MissionOption):
        level_id = _position(option.level, len(store.levels), "level")
        level = store.level(level_id)
        mission_id = _position(option.label, len(level.missions), "mission")
        mission = store.mission(level_id, mission_id)
        return Practice(label=f"HSK {level_id} - Mission {mission_id}", terms=list(mission.terms))
    return Practice(label="Saved Terms", terms=store.saved_terms())


def parse_choice(text: str, options: list[MenuOption]) -> MenuOption | None:
    """Match typed menu input by 1-based number or unique label fragment."""
    choice = text.strip().lower()
    if not choice:
        return None
    if choice.isdecimal():
        index = int(choice) - 1
        if 0 <= index < len(options):
            return options[index]
        return None
    exact = [option for option in options if option.label.lower() == choice]
    if len(exact) == 1:
        return exact[0]
    fuzzy = [option for option in options if choice in option.label.lower()]
    if len(fuzzy) == 1:
        return fuzzy[0]
    return None


def _position(label: str, size: int, kind: str) -> int:
    """Convert a 1-based id label into a checked position."""
    if not label.isdecimal():
        raise ParseFailure(f"Invalid {kind} selection: {label!r}")
    value = int(label)
    if not 1 <= value <= size:
        raise ParseFailure(f"No {kind} {value}; expected 1-{size}.")
    return value
