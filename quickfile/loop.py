"""Main interactive event loop for the launcher.

One ``select`` call multiplexes stdin, the response listener, its accepted
connections, and the request connection; the debounce deadline bounds the
wait. Every handler runs on this thread, one at a time.
"""

from __future__ import annotations

import select
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from .input import has_pending_input, read_key
from .render import CHROME_ROWS, clamp_list_start, list_row_count
from .state import SessionState

IDLE_TICK_SECONDS = 0.25


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    idle_tick_seconds: float = IDLE_TICK_SECONDS


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    Keeping the loop callback-driven isolates feature logic outside the core
    event loop and makes behavior easier to unit test.
    """

    transport_filenos: Callable[[], list[int]]
    service_transport: Callable[[list[int]], None]
    debounce_timeout: Callable[[], float | None]
    poll_debounce: Callable[[], bool]
    maybe_reconnect: Callable[[], None]
    render: Callable[[int], None]
    handle_key: Callable[[str], bool]
    select_fn: Callable[..., tuple[list, list, list]] = select.select
    clock: Callable[[], float] = time.monotonic


def _normalize_enter(state: SessionState, key: str) -> str | None:
    """Collapse CR/LF pairs into one ``ENTER``; returns ``None`` to skip."""
    if state.skip_next_lf and key == "ENTER_LF":
        state.skip_next_lf = False
        return None
    if key == "ENTER_CR":
        state.skip_next_lf = True
        return "ENTER"
    state.skip_next_lf = False
    if key == "ENTER_LF":
        return "ENTER"
    return key


def _sync_view(state: SessionState, now: float) -> None:
    term = shutil.get_terminal_size((80, 24))
    usable = max(CHROME_ROWS + 1, term.lines)
    if usable != state.usable:
        state.usable = usable
        state.dirty = True
    if state.status_message and now >= state.status_message_until:
        state.status_message = ""
        state.status_message_until = 0.0
        state.dirty = True
    list_start = clamp_list_start(
        state.selected_index,
        state.list_start,
        list_row_count(state.usable),
        len(state.results),
    )
    if list_start != state.list_start:
        state.list_start = list_start
        state.dirty = True


def run_main_loop(
    state: SessionState,
    terminal,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the launcher loop until Confirm or Cancel ends the session."""
    ops = callbacks
    with terminal.raw_mode():
        while True:
            _sync_view(state, ops.clock())
            if state.dirty:
                ops.render(shutil.get_terminal_size((80, 24)).columns)
                state.dirty = False

            timeout = timing.idle_tick_seconds
            debounce_wait = ops.debounce_timeout()
            if debounce_wait is not None:
                timeout = min(timeout, debounce_wait)
            if has_pending_input():
                timeout = 0.0

            try:
                ready, _, _ = ops.select_fn([stdin_fd, *ops.transport_filenos()], [], [], timeout)
            except InterruptedError:
                continue

            transport_ready = [fd for fd in ready if fd != stdin_fd]
            if transport_ready:
                ops.service_transport(transport_ready)
            ops.poll_debounce()
            if not ready:
                ops.maybe_reconnect()

            if stdin_fd not in ready and not has_pending_input():
                continue
            key = read_key(stdin_fd, timeout_ms=0)
            if not key:
                # Readable stdin with no bytes means the terminal went away.
                break
            normalized = _normalize_enter(state, key)
            if normalized is None:
                continue
            if ops.handle_key(normalized):
                break
