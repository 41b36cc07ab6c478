"""hskdeck package."""

from __future__ import annotations

import logging
import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

__all__ = ["__version__"]

logging.getLogger(__name__).addHandler(logging.NullHandler())


def _version_from_pyproject(package_dir: Path | None = None) -> str | None:
    """Version from this project's pyproject.toml when running from a source checkout.

    Only ``<root>/src/hskdeck`` layouts are considered, and the file must
    declare ``name = "hskdeck"``, so an enclosing project is never read.
    """
    if package_dir is None:
        package_dir = Path(__file__).resolve().parent
    if package_dir.parent.name != "src":
        return None
    pyproject = package_dir.parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return None
    in_project = False
    fields: dict[str, str] = {}
    for line in pyproject.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("[") and stripped.endswith("]"):
            in_project = stripped == "[project]"
            continue
        if in_project:
            match = re.match(r'^(name|version)\s*=\s*"([^"]+)"\s*$', stripped)
            if match:
                fields[match.group(1)] = match.group(2)
    if fields.get("name") != "hskdeck":
        return None
    return fields.get("version")


_project_version = _version_from_pyproject()
if _project_version is not None:
    __version__ = _project_version
else:
    try:
        __version__ = version("hskdeck")
    except PackageNotFoundError:
        __version__ = "0+unknown"
