"""Load, validate, and persist the vocabulary document."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from .models import Level, Mission, Term

logger = logging.getLogger(__name__)


class StoreLoadError(ValueError):
    """Raised when the vocabulary document cannot be loaded."""


def _term_from_dict(where: str, raw: Any) -> Term:
    """Build a term from raw JSON content."""
    if not isinstance(raw, dict):
        raise StoreLoadError(f"{where}: term must be an object.")
    values: dict[str, str] = {}
    for key in ("pinyin", "hanzi"):
        value = raw.get(key)
        if not isinstance(value, str):
            raise StoreLoadError(f"{where}: term field '{key}' must be a string.")
        values[key] = value
    saved = raw.get("saved", False)
    if not isinstance(saved, bool):
        raise StoreLoadError(f"{where}: term field 'saved' must be true or false.")
    return Term(pinyin=values["pinyin"], hanzi=values["hanzi"], saved=saved)


def _positional_id(where: str, raw: dict[str, Any], position: int) -> int:
    """Return the id of an entry, requiring it to equal its 1-based position."""
    value = raw.get("id")
    if isinstance(value, bool) or not isinstance(value, int):
        raise StoreLoadError(f"{where}: 'id' must be an integer.")
    if value != position:
        raise StoreLoadError(f"{where}: expected id {position}, found {value}; ids must be 1, 2, 3, ... in order.")
    return value


def _required(where: str, raw: dict[str, Any], key: str) -> Any:
    if key not in raw:
        raise StoreLoadError(f"{where}: missing '{key}'.")
    return raw[key]


def _mission_from_dict(level_id: int, position: int, raw: Any) -> Mission:
    """Build a mission from raw JSON content."""
    where = f"level {level_id} mission #{position}"
    if not isinstance(raw, dict):
        raise StoreLoadError(f"{where}: mission must be an object.")
    mission_id = _positional_id(where, raw, position)
    raw_terms = _required(where, raw, "terms")
    if not isinstance(raw_terms, list):
        raise StoreLoadError(f"{where}: 'terms' must be a list.")
    terms = [_term_from_dict(f"{where} term #{idx}", item) for idx, item in enumerate(raw_terms, start=1)]
    return Mission(id=mission_id, terms=terms)


def _level_from_dict(position: int, raw: Any) -> Level:
    """Build a level from raw JSON content."""
    where = f"level #{position}"
    if not isinstance(raw, dict):
        raise StoreLoadError(f"{where}: level must be an object.")
    level_id = _positional_id(where, raw, position)
    raw_missions = _required(where, raw, "missions")
    if not isinstance(raw_missions, list):
        raise StoreLoadError(f"{where}: 'missions' must be a list.")
    missions = [_mission_from_dict(level_id, idx, item) for idx, item in enumerate(raw_missions, start=1)]
    return Level(id=level_id, missions=missions)


class TermStore:
    """In-memory vocabulary tree shared by menus and practice sessions."""

    def __init__(self, levels: list[Level]) -> None:
        self.levels = levels

    @classmethod
    def from_document(cls, raw: Any) -> TermStore:
        """Build a store from a decoded JSON document."""
        if not isinstance(raw, list):
            raise StoreLoadError("Document root must be a list of levels.")
        return cls([_level_from_dict(idx, item) for idx, item in enumerate(raw, start=1)])

    def to_document(self) -> list[dict[str, Any]]:
        """Return the JSON-ready document for this store."""
        return [
            {
                "id": level.id,
                "missions": [
                    {
                        "id": mission.id,
                        "terms": [
                            {"pinyin": term.pinyin, "hanzi": term.hanzi, "saved": term.saved}
                            for term in mission.terms
                        ],
                    }
                    for mission in level.missions
                ],
            }
            for level in self.levels
        ]

    def level(self, level_id: int) -> Level:
        """Return a level by its 1-based id."""
        if not 1 <= level_id <= len(self.levels):
            raise KeyError(level_id)
        return self.levels[level_id - 1]

    def mission(self, level_id: int, mission_id: int) -> Mission:
        """Return a mission by level id and 1-based mission id."""
        missions = self.level(level_id).missions
        if not 1 <= mission_id <= len(missions):
            raise KeyError((level_id, mission_id))
        return missions[mission_id - 1]

    def saved_terms(self) -> list[Term]:
        """Return every saved term in document order."""
        return [
            term
            for level in self.levels
            for mission in level.missions
            for term in mission.terms
            if term.saved
        ]

    def term_count(self) -> int:
        """Return the number of terms across all levels."""
        return sum(len(mission.terms) for level in self.levels for mission in level.missions)


def load_store(path: Path | str) -> TermStore:
    """Load and validate the vocabulary document at ``path``."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise StoreLoadError(f"Unable to read {file_path}: {exc.strerror or exc}") from exc
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoreLoadError(f"{file_path} is not valid JSON: {exc}") from exc
    store = TermStore.from_document(raw)
    logger.debug("Loaded %d levels, %d terms from %s", len(store.levels), store.term_count(), file_path)
    return store


def save_store(store: TermStore, path: Path | str) -> None:
    """Write the store back to ``path`` as pretty-printed JSON.

    The document is written to a temp file beside the symlink-resolved target
    and moved into place, so a failed write never truncates the existing file.
    An existing file keeps its permission bits.
    """
    file_path = Path(path).resolve()
    payload = json.dumps(store.to_document(), indent=2, ensure_ascii=False) + "\n"
    fd, tmp_name = tempfile.mkstemp(prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        if file_path.exists():
            shutil.copymode(file_path, tmp_name)
        os.replace(tmp_name, file_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved %d levels to %s", len(store.levels), file_path)
