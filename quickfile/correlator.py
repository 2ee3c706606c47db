"""Apply pushed response frames to the session, in arrival order only.

Requests carry no identifier, so a late answer to an older query replaces the
display just like a fresh one would.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .errors import BackendError
from .protocol import (
    ErrorFrame,
    Frame,
    RefreshCompleteFrame,
    ResponseSnapshot,
    SearchResultsFrame,
    StatusFrame,
    UnknownFrame,
)
from .state import SessionState

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 3.0


class ResponseCorrelator:
    def __init__(self, state: SessionState, clock: Callable[[], float] = time.monotonic) -> None:
        self.state = state
        self.clock = clock
        self.frames_applied = 0

    def _set_status_message(self, message: str) -> None:
        self.state.status_message = message
        self.state.status_message_until = self.clock() + STATUS_MESSAGE_SECONDS

    def handle_frame(self, frame: Frame) -> None:
        state = self.state
        if isinstance(frame, SearchResultsFrame):
            state.snapshot = ResponseSnapshot.from_results(frame)
            state.selected_index = 0
            state.list_start = 0
        elif isinstance(frame, ErrorFrame):
            logger.info("%s", BackendError(frame.message))
            state.snapshot = ResponseSnapshot.from_error(frame)
            state.selected_index = 0
            state.list_start = 0
        elif isinstance(frame, StatusFrame):
            self._set_status_message(f"{frame.files_count} files indexed")
        elif isinstance(frame, RefreshCompleteFrame):
            self._set_status_message(f"index refreshed: {frame.files_count} files")
        elif isinstance(frame, UnknownFrame):
            logger.debug("ignoring frame of type %r", frame.type_name)
            return
        else:
            return
        self.frames_applied += 1
        state.dirty = True
