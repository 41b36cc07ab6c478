"""Runtime settings resolved from CLI flags, environment, and defaults."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .lookup import DEFAULT_LOOKUP_COMMAND

DEFAULT_STORAGE_PATH = Path("practice_sheet.json")
STORAGE_ENV = "HSKDECK_STORAGE"
LOOKUP_ENV = "HSKDECK_LOOKUP"
LOG_ENV = "HSKDECK_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    storage_path: Path = DEFAULT_STORAGE_PATH
    lookup_command: str = DEFAULT_LOOKUP_COMMAND
    return_to_menu: bool = False
    log_file: Path | None = None


def load_settings(
    environ: Mapping[str, str],
    *,
    storage: str | None = None,
    lookup_command: str | None = None,
    return_to_menu: bool = False,
    log_file: str | None = None,
) -> Settings:
    """Merge explicit options over environment values over defaults."""
    storage_text = storage or environ.get(STORAGE_ENV, "").strip()
    command_text = lookup_command or environ.get(LOOKUP_ENV, "").strip()
    log_text = log_file or environ.get(LOG_ENV, "").strip()
    return Settings(
        storage_path=Path(storage_text) if storage_text else DEFAULT_STORAGE_PATH,
        lookup_command=command_text or DEFAULT_LOOKUP_COMMAND,
        return_to_menu=return_to_menu,
        log_file=Path(log_text) if log_text else None,
    )


def configure_logging(log_file: Path | None) -> None:
    """Send package debug logs to ``log_file``; stay silent without one.

    Practice runs in raw mode, so logs never go to the terminal.
    """
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("hskdeck")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
