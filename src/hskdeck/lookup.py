"""External dictionary lookup via the ``hskindex`` tool."""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_COMMAND = "hskindex"


class LookupFailure(RuntimeError):
    """Raised when the lookup tool cannot run or exits with an error."""


def run_lookup(term: str, command: str = DEFAULT_LOOKUP_COMMAND) -> str:
    """Run ``command term`` and return its decoded standard output.

    There is no timeout: a tool that never exits blocks the caller.
    """
    logger.debug("Looking up %r with %s", term, command)
    try:
        completed = subprocess.run([command, term], capture_output=True, check=False)
    except OSError as exc:
        logger.debug("Lookup tool failed to start: %s", exc)
        raise LookupFailure(f"Failed to execute {command}: {exc.strerror or exc}") from exc
    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        logger.debug("Lookup tool exited with %d: %s", completed.returncode, stderr)
        detail = f": {stderr}" if stderr else ""
        raise LookupFailure(f"{command} exited with status {completed.returncode}{detail}")
    return completed.stdout.decode("utf-8", errors="replace")
