"""Quiet-period coalescing of query edits into Search dispatches."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

from .protocol import DEFAULT_RESULT_LIMIT, SearchRequest
from .state import SessionState

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.1


class RequestSink(Protocol):
    @property
    def connected(self) -> bool: ...

    def send(self, request: SearchRequest) -> bool: ...


class DebounceController:
    """Restartable countdown owned by the event loop.

    The loop calls ``on_text_changed`` for every edit, uses ``timeout`` as its
    select timeout, and calls ``poll`` after every wakeup.
    """

    def __init__(
        self,
        state: SessionState,
        transport: RequestSink,
        delay: float = DEBOUNCE_SECONDS,
        limit: int = DEFAULT_RESULT_LIMIT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state = state
        self.transport = transport
        self.delay = delay
        self.limit = limit
        self.clock = clock
        self._deadline: float | None = None

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    def on_text_changed(self) -> None:
        self._deadline = self.clock() + self.delay

    def cancel(self) -> None:
        self._deadline = None

    def timeout(self, now: float | None = None) -> float | None:
        """Seconds until the countdown elapses, or ``None`` when idle."""
        if self._deadline is None:
            return None
        current = self.clock() if now is None else now
        return max(0.0, self._deadline - current)

    def poll(self, now: float | None = None) -> bool:
        """Fire the countdown if it has elapsed; returns whether a request went out."""
        if self._deadline is None:
            return False
        current = self.clock() if now is None else now
        if current < self._deadline:
            return False
        self._deadline = None
        return self.dispatch()

    def dispatch(self) -> bool:
        text = self.state.query_text
        if text == self.state.last_dispatched_query:
            return False
        if not self.transport.connected:
            logger.debug("not connected; holding query %r", text)
            return False
        if not self.transport.send(SearchRequest.search(text, self.limit)):
            self.state.transport_connected = False
            self.state.dirty = True
            return False
        self.state.last_dispatched_query = text
        return True
