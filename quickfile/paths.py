"""Socket locations for the interactive launcher and the one-shot client."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

REQUEST_SOCKET_NAME = "quickfile-daemon.sock"
RESPONSE_SOCKET_NAME = "quickfile-response.sock"
RUNTIME_ROOT = Path("/run/user")
SHARED_SOCKET_DIR = Path("/tmp")


@dataclass(frozen=True)
class SocketPaths:
    request: Path
    response: Path

    @classmethod
    def in_directory(cls, directory: Path) -> SocketPaths:
        return cls(request=directory / REQUEST_SOCKET_NAME, response=directory / RESPONSE_SOCKET_NAME)


BRIDGE_SOCKETS = SocketPaths.in_directory(SHARED_SOCKET_DIR)


def resolve_user_id(command: tuple[str, ...] = ("id", "-u")) -> int | None:
    """Ask the external ``id`` command for the invoking user's numeric id."""
    try:
        proc = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            check=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.warning("cannot resolve user id via %s: %s", " ".join(command), exc)
        return None
    raw = proc.stdout.strip()
    if not raw.isdigit():
        logger.warning("unexpected user id output: %r", raw)
        return None
    return int(raw)


def runtime_dir_for_user(uid: int) -> Path:
    return RUNTIME_ROOT / str(uid)


def session_socket_paths(runtime_dir: Path | None = None) -> SocketPaths | None:
    """Return per-user socket paths, or ``None`` when the user id is unknown.

    An explicit ``runtime_dir`` skips the user id lookup.
    """
    if runtime_dir is not None:
        return SocketPaths.in_directory(runtime_dir)
    uid = resolve_user_id()
    if uid is None:
        return None
    return SocketPaths.in_directory(runtime_dir_for_user(uid))
