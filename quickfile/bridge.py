"""Blocking call/response over the push-based two-socket transport.

Used by the scriptable client: attach to the response socket, write the
request, then wait for one complete frame. Without a usable response channel
the request is sent fire-and-forget and no output is produced.
"""

from __future__ import annotations

import logging
import socket
import time
from collections.abc import Callable

from .errors import DaemonUnavailable, ResponseTimeout, TransportUnavailable
from .paths import BRIDGE_SOCKETS, SocketPaths
from .protocol import SearchRequest, encode_request
from .transport import close_quietly, open_unix_connection, read_frame, send_line

logger = logging.getLogger(__name__)

RESPONSE_TIMEOUT_SECONDS = 5.0
LISTENER_SETTLE_SECONDS = 0.1
POLL_INTERVAL_SECONDS = 0.1


class OneShotClient:
    def __init__(
        self,
        sockets: SocketPaths = BRIDGE_SOCKETS,
        *,
        timeout: float = RESPONSE_TIMEOUT_SECONDS,
        settle: float = LISTENER_SETTLE_SECONDS,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sockets = sockets
        self.timeout = timeout
        self.settle = settle
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.clock = clock

    def _attach_listener(self) -> socket.socket | None:
        if not self.sockets.response.exists():
            logger.debug("no response socket at %s", self.sockets.response)
            return None
        try:
            listener = open_unix_connection(self.sockets.response, timeout=None)
        except OSError as exc:
            logger.info("cannot attach to response socket %s: %s", self.sockets.response, exc)
            return None
        self.sleep(self.settle)
        return listener

    def _send(self, payload: str) -> None:
        try:
            conn = open_unix_connection(self.sockets.request)
        except OSError as exc:
            raise TransportUnavailable(f"cannot connect to {self.sockets.request}: {exc}") from exc
        try:
            send_line(conn, payload)
        except OSError as exc:
            raise TransportUnavailable(f"request write failed: {exc}") from exc
        finally:
            close_quietly(conn)

    def call(self, request: SearchRequest) -> str | None:
        """Send ``request`` and return the raw response frame, if one arrives.

        Raises ``DaemonUnavailable`` when the request socket path is missing and
        ``TransportUnavailable`` when it exists but cannot be written. A
        timeout is not an error: the request is re-sent fire-and-forget and
        ``None`` is returned.
        """
        if not self.sockets.request.exists():
            raise DaemonUnavailable()
        payload = encode_request(request)

        listener = self._attach_listener()
        if listener is not None:
            try:
                self._send(payload)
                try:
                    frame = read_frame(listener, self.timeout, self.poll_interval, self.clock)
                except (ResponseTimeout, OSError) as exc:
                    logger.info("no response (%s); falling back to fire-and-forget", exc)
                else:
                    return frame.decode("utf-8", errors="replace")
            finally:
                close_quietly(listener)

        self._send(payload)
        return None
