"""Two-socket transport: outbound request writes, inbound pushed responses.

Frames are newline-delimited JSON documents. The outbound side is a plain
client connection; the inbound side is a listening socket that the daemon
connects to and streams frames into. Everything here is driven by the caller's
``select`` loop, so no method blocks waiting for the peer.
"""

from __future__ import annotations

import logging
import os
import select
import socket
import stat
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from .errors import CleanupFailure, FrameParseError, ResponseTimeout
from .protocol import Frame, SearchRequest, decode_frame_line, encode_request

logger = logging.getLogger(__name__)

FRAME_DELIMITER = b"\n"
RECV_CHUNK_BYTES = 64 * 1024
MAX_FRAME_BYTES = 16 * 1024 * 1024
SEND_TIMEOUT_SECONDS = 2.0
# Upper bound on how long a stalled daemon can block the launcher loop.
INTERACTIVE_SEND_TIMEOUT_SECONDS = 0.2
LISTEN_BACKLOG = 8

FrameHandler = Callable[[Frame], None]


class LineSplitter:
    """Accumulate stream bytes and cut them into complete lines."""

    def __init__(self, max_line_bytes: int = MAX_FRAME_BYTES) -> None:
        self.max_line_bytes = max_line_bytes
        self._buffer = bytearray()

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer.extend(data)
        lines: list[bytes] = []
        while True:
            idx = self._buffer.find(FRAME_DELIMITER)
            if idx < 0:
                break
            lines.append(bytes(self._buffer[:idx]))
            del self._buffer[: idx + 1]
        if len(self._buffer) > self.max_line_bytes:
            logger.debug("dropping oversized partial frame (%d bytes)", len(self._buffer))
            self._buffer.clear()
        return lines

    def flush(self) -> list[bytes]:
        """Return the unterminated tail at end of stream, if any."""
        if not self._buffer.strip():
            self._buffer.clear()
            return []
        tail = bytes(self._buffer)
        self._buffer.clear()
        return [tail]

    @property
    def pending(self) -> bool:
        return bool(self._buffer)


def dispatch_lines(lines: Iterable[bytes], on_frame: FrameHandler) -> int:
    """Decode each line and hand valid frames to ``on_frame``.

    Malformed lines are dropped; returns how many frames were delivered.
    """
    delivered = 0
    for line in lines:
        if not line.strip():
            continue
        try:
            frame = decode_frame_line(line)
        except FrameParseError as exc:
            logger.debug("discarding malformed frame: %s", exc)
            continue
        on_frame(frame)
        delivered += 1
    return delivered


def send_line(sock: socket.socket | None, payload: str) -> bool:
    """Write ``payload`` plus the frame delimiter; no-op without a socket."""
    if sock is None:
        return False
    sock.sendall(payload.encode("utf-8") + FRAME_DELIMITER)
    return True


def open_unix_connection(path: Path, timeout: float | None = SEND_TIMEOUT_SECONDS) -> socket.socket:
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout)
        sock.connect(os.fspath(path))
    except OSError:
        sock.close()
        raise
    return sock


def close_quietly(sock: socket.socket | None) -> None:
    """Close ``sock``, logging instead of raising on failure."""
    if sock is None:
        return
    try:
        sock.close()
    except OSError as exc:
        logger.warning("%s", CleanupFailure(f"socket close failed: {exc}"))


def read_frame(
    sock: socket.socket,
    timeout: float,
    poll_interval: float = 0.1,
    clock: Callable[[], float] = time.monotonic,
) -> bytes:
    """Block until one complete frame arrives on ``sock`` or ``timeout`` passes.

    Waits in ``poll_interval`` slices. A peer that closes the stream after
    writing an unterminated line still yields that line. Raises
    ``ResponseTimeout`` when nothing complete shows up in time.
    """
    splitter = LineSplitter()
    deadline = clock() + max(0.0, timeout)
    while True:
        remaining = deadline - clock()
        if remaining <= 0:
            raise ResponseTimeout(f"no response frame within {timeout:g}s")
        ready, _, _ = select.select([sock], [], [], min(poll_interval, remaining))
        if not ready:
            continue
        chunk = sock.recv(RECV_CHUNK_BYTES)
        if not chunk:
            tail = splitter.flush()
            if tail:
                return tail[0]
            raise ResponseTimeout("response stream closed before a frame arrived")
        for line in splitter.feed(chunk):
            if line.strip():
                return line


class OutboundChannel:
    """Write-capable connection to the daemon's request socket."""

    def __init__(
        self,
        on_frame: FrameHandler | None = None,
        send_timeout: float = INTERACTIVE_SEND_TIMEOUT_SECONDS,
    ) -> None:
        self.on_frame = on_frame
        self.send_timeout = send_timeout
        self.path: Path | None = None
        self._sock: socket.socket | None = None
        self._splitter = LineSplitter()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def fileno(self) -> int | None:
        return self._sock.fileno() if self._sock is not None else None

    def connect(self, path: Path) -> bool:
        """Connect to ``path``; returns connectivity and never retries."""
        self.close()
        self.path = Path(path)
        try:
            self._sock = open_unix_connection(self.path, timeout=self.send_timeout)
        except OSError as exc:
            logger.info("request socket %s unavailable: %s", self.path, exc)
            self._sock = None
            return False
        self._splitter = LineSplitter()
        logger.info("connected to request socket %s", self.path)
        return True

    def send(self, payload: str) -> bool:
        """Send one frame; a failed or timed-out write drops the connection."""
        if self._sock is None:
            return False
        try:
            return send_line(self._sock, payload)
        except OSError as exc:
            logger.warning("request write failed, disconnecting: %s", exc)
            self.close()
            return False

    def service(self) -> None:
        """Drain replies the daemon wrote back on the request connection.

        The daemon falls back to this connection while it has no response
        socket attached, so these lines are decoded like inbound frames.
        """
        if self._sock is None:
            return
        try:
            chunk = self._sock.recv(RECV_CHUNK_BYTES)
        except (BlockingIOError, socket.timeout):
            return
        except OSError as exc:
            logger.warning("request connection read failed: %s", exc)
            self.close()
            return
        if not chunk:
            logger.info("daemon closed request connection")
            lines = self._splitter.flush()
            self.close()
        else:
            lines = self._splitter.feed(chunk)
        if self.on_frame is not None:
            dispatch_lines(lines, self.on_frame)

    def close(self) -> None:
        sock, self._sock = self._sock, None
        close_quietly(sock)


class InboundListener:
    """Listening socket that accepts daemon connections and streams frames."""

    def __init__(self, on_frame: FrameHandler) -> None:
        self.on_frame = on_frame
        self.path: Path | None = None
        self._server: socket.socket | None = None
        self._connections: dict[int, tuple[socket.socket, LineSplitter]] = {}

    @property
    def armed(self) -> bool:
        return self._server is not None

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def arm(self, path: Path) -> bool:
        """Bind and listen on ``path``, replacing a stale socket file."""
        self.close()
        target = Path(path)
        try:
            if target.is_socket():
                target.unlink()
            server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as exc:
            logger.warning("cannot prepare response socket %s: %s", target, exc)
            return False
        try:
            server.bind(os.fspath(target))
            server.listen(LISTEN_BACKLOG)
            server.setblocking(False)
        except OSError as exc:
            logger.warning("cannot listen on response socket %s: %s", target, exc)
            server.close()
            return False
        self._server = server
        self.path = target
        logger.info("listening for responses on %s", target)
        return True

    def filenos(self) -> list[int]:
        fds: list[int] = []
        if self._server is not None:
            fds.append(self._server.fileno())
        fds.extend(self._connections.keys())
        return fds

    def _accept(self) -> None:
        if self._server is None:
            return
        while True:
            try:
                conn, _addr = self._server.accept()
            except (BlockingIOError, InterruptedError):
                return
            except OSError as exc:
                logger.warning("accept on response socket failed: %s", exc)
                return
            conn.setblocking(False)
            self._connections[conn.fileno()] = (conn, LineSplitter())
            logger.debug("daemon attached to response socket (%d open)", len(self._connections))

    def _read_connection(self, fd: int) -> None:
        conn, splitter = self._connections[fd]
        try:
            chunk = conn.recv(RECV_CHUNK_BYTES)
        except (BlockingIOError, InterruptedError):
            return
        except OSError as exc:
            logger.debug("response connection error: %s", exc)
            chunk = b""
        if chunk:
            dispatch_lines(splitter.feed(chunk), self.on_frame)
            return
        del self._connections[fd]
        close_quietly(conn)
        dispatch_lines(splitter.flush(), self.on_frame)

    def service(self, ready: Iterable[int]) -> None:
        """Handle readiness for the listening socket and its connections."""
        for fd in ready:
            if self._server is not None and fd == self._server.fileno():
                self._accept()
            elif fd in self._connections:
                self._read_connection(fd)

    def close(self) -> None:
        for conn, _splitter in list(self._connections.values()):
            close_quietly(conn)
        self._connections.clear()
        server, self._server = self._server, None
        if server is None:
            return
        close_quietly(server)
        if self.path is not None:
            try:
                mode = os.lstat(self.path).st_mode
                if stat.S_ISSOCK(mode):
                    self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                logger.warning("%s", CleanupFailure(f"cannot remove {self.path}: {exc}"))


class TransportDuplex:
    """Owns both socket roles for one interactive session."""

    def __init__(self, on_frame: FrameHandler) -> None:
        self.outbound = OutboundChannel(on_frame)
        self.inbound = InboundListener(on_frame)

    @property
    def connected(self) -> bool:
        return self.outbound.connected

    def arm_inbound(self, path: Path) -> bool:
        return self.inbound.arm(path)

    def connect_outbound(self, path: Path) -> bool:
        return self.outbound.connect(path)

    def send(self, request: SearchRequest) -> bool:
        """Send ``request``; callers check ``connected`` first."""
        sent = self.outbound.send(encode_request(request))
        if sent:
            logger.debug("sent %s request", request.kind)
        return sent

    def filenos(self) -> list[int]:
        fds = self.inbound.filenos()
        outbound_fd = self.outbound.fileno()
        if outbound_fd is not None:
            fds.append(outbound_fd)
        return fds

    def service(self, ready: Iterable[int]) -> None:
        ready_fds = list(ready)
        outbound_fd = self.outbound.fileno()
        if outbound_fd is not None and outbound_fd in ready_fds:
            self.outbound.service()
        self.inbound.service(fd for fd in ready_fds if fd != outbound_fd)

    def close(self) -> None:
        self.outbound.close()
        self.inbound.close()
