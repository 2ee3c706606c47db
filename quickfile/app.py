"""Runtime composition layer for the quickfile launcher.

Builds the session state, wires transport, debounce, correlation and selection
together, and runs the event loop until the user confirms or cancels.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Callable
from functools import partial
from pathlib import Path

from .config import load_opener_command, load_reconnect_seconds, load_theme_name
from .correlator import ResponseCorrelator
from .debounce import DebounceController
from .keys import LauncherKeyCallbacks, handle_launcher_key
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .opener import launch_opener
from .paths import SocketPaths, session_socket_paths
from .protocol import DEFAULT_RESULT_LIMIT, SearchRequest
from .render import RenderContext, list_row_count, render_frame
from .selection import SelectionController
from .state import SessionState
from .terminal import TerminalController
from .transport import TransportDuplex
from .ui_theme import UITheme, resolve_theme

logger = logging.getLogger(__name__)


class LauncherSession:
    """One interactive session: state plus the components that mutate it."""

    def __init__(
        self,
        sockets: SocketPaths | None,
        open_file: Callable[[str], str | None],
        *,
        reconnect_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        transport: TransportDuplex | None = None,
    ) -> None:
        self.state = SessionState()
        self.sockets = sockets
        self.reconnect_seconds = reconnect_seconds
        self.clock = clock
        self.correlator = ResponseCorrelator(self.state, clock)
        self.transport = transport if transport is not None else TransportDuplex(self.correlator.handle_frame)
        self.debounce = DebounceController(self.state, self.transport, clock=clock)
        self.selection = SelectionController(self.state, open_file)
        self._last_connect_attempt: float | None = None

    def start(self) -> None:
        """Arm the response listener, then connect and pre-populate the list."""
        if self.sockets is None:
            logger.warning("user runtime directory unknown; staying offline")
            return
        # The listener must exist before any request, or the first reply is lost.
        self.transport.arm_inbound(self.sockets.response)
        self._connect()

    def _connect(self) -> bool:
        if self.sockets is None:
            return False
        self._last_connect_attempt = self.clock()
        connected = self.transport.connect_outbound(self.sockets.request)
        self._sync_connectivity()
        if connected and self.state.last_dispatched_query is None and not self.state.query_text:
            self._send_initial_search()
        return connected

    def _send_initial_search(self) -> None:
        if self.transport.send(SearchRequest.search("", DEFAULT_RESULT_LIMIT)):
            self.state.last_dispatched_query = ""
        self._sync_connectivity()

    def _sync_connectivity(self) -> None:
        connected = self.transport.connected
        if connected != self.state.transport_connected:
            self.state.transport_connected = connected
            self.state.dirty = True

    def maybe_reconnect(self) -> None:
        if self.sockets is None or self.reconnect_seconds <= 0 or self.transport.connected:
            return
        now = self.clock()
        if self._last_connect_attempt is not None and now - self._last_connect_attempt < self.reconnect_seconds:
            return
        self._connect()

    def service_transport(self, ready: list[int]) -> None:
        self.transport.service(ready)
        self._sync_connectivity()

    def poll_debounce(self) -> bool:
        fired = self.debounce.poll()
        self._sync_connectivity()
        return fired

    def visible_list_rows(self) -> int:
        return list_row_count(self.state.usable)

    def handle_key(self, key: str) -> bool:
        callbacks = LauncherKeyCallbacks(
            selection=self.selection,
            on_text_changed=self.debounce.on_text_changed,
            visible_list_rows=self.visible_list_rows,
        )
        return handle_launcher_key(key, self.state, callbacks)

    def render_context(self, columns: int, theme: UITheme) -> RenderContext:
        snapshot = self.state.snapshot
        return RenderContext(
            query_text=self.state.query_text,
            results=snapshot.results,
            selected_index=self.state.selected_index,
            list_start=self.state.list_start,
            total_files=snapshot.total_files,
            width=columns,
            max_lines=self.state.usable,
            connected=self.state.transport_connected,
            snapshot_kind=snapshot.kind,
            error_message=snapshot.message,
            status_message=self.state.status_message,
            theme=theme,
        )

    def loop_callbacks(self, theme: UITheme) -> RuntimeLoopCallbacks:
        return RuntimeLoopCallbacks(
            transport_filenos=self.transport.filenos,
            service_transport=self.service_transport,
            debounce_timeout=self.debounce.timeout,
            poll_debounce=self.poll_debounce,
            maybe_reconnect=self.maybe_reconnect,
            render=lambda columns: render_frame(self.render_context(columns, theme)),
            handle_key=self.handle_key,
            clock=self.clock,
        )

    def close(self) -> None:
        """Tear down both channels; safe to call more than once."""
        self.debounce.cancel()
        self.transport.close()
        self._sync_connectivity()


def run_launcher(
    runtime_dir: Path | None = None,
    theme_name: str | None = None,
    no_color: bool = False,
) -> int:
    """Run the interactive launcher; returns a process exit code."""
    stdin_fd = sys.stdin.fileno()
    if not os.isatty(stdin_fd):
        sys.stderr.write("quickfile: the launcher needs an interactive terminal\n")
        return 1

    sockets = session_socket_paths(runtime_dir)
    theme = resolve_theme(theme_name or load_theme_name(), no_color=no_color)
    session = LauncherSession(
        sockets,
        partial(launch_opener, command=load_opener_command()),
        reconnect_seconds=load_reconnect_seconds(),
    )
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    session.start()
    try:
        run_main_loop(session.state, terminal, stdin_fd, RuntimeLoopTiming(), session.loop_callbacks(theme))
    finally:
        session.close()
    if session.selection.confirmed_path is not None:
        logger.info("confirmed %s", session.selection.confirmed_path)
    return 0
