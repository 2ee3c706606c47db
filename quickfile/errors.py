"""Exception taxonomy for the quickfile client.

Only the CLI lets these escape to the user; the interactive session turns
every one of them into state (empty list, status line, "connecting").
"""

from __future__ import annotations


class QuickfileError(Exception):
    """Base class for all client-side failures."""


class TransportUnavailable(QuickfileError):
    """A socket path is missing or nothing accepts connections on it."""


class DaemonUnavailable(TransportUnavailable):
    """The request socket does not exist, so no daemon is running."""

    def __init__(self, message: str = "Daemon not running") -> None:
        super().__init__(message)
        self.message = message


class FrameParseError(QuickfileError):
    """One inbound line could not be decoded into a frame."""


class BackendError(QuickfileError):
    """The daemon answered with an explicit Error frame."""


class ResponseTimeout(QuickfileError):
    """No complete response frame arrived before the deadline."""


class CleanupFailure(QuickfileError):
    """A socket or listener could not be torn down cleanly."""
