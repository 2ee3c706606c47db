"""Open-file helper for confirmed launcher selections.

Runs the configured opener detached from the launcher's terminal.
Returns an error message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

logger = logging.getLogger(__name__)


def launch_opener(target: str, command: Sequence[str]) -> str | None:
    cmd = [part for part in command if part]
    if not cmd:
        return "Cannot open: opener command is empty."
    logger.info("opening %s with %s", target, cmd[0])
    try:
        subprocess.Popen(
            [*cmd, target],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        return f"Failed to launch opener: {exc}"
    return None
