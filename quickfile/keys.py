"""Launcher keyboard and mouse dispatch."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .input import parse_mouse_col_row
from .render import result_index_for_row
from .selection import SelectionController
from .state import SessionState


@dataclass(frozen=True)
class LauncherKeyCallbacks:
    """External operations required for launcher key handling."""

    selection: SelectionController
    on_text_changed: Callable[[], None]
    visible_list_rows: Callable[[], int]


def _set_query(state: SessionState, text: str, on_text_changed: Callable[[], None]) -> None:
    if text == state.query_text:
        return
    state.query_text = text
    state.dirty = True
    on_text_changed()


def _delete_last_word(text: str) -> str:
    trimmed = text.rstrip()
    cut = max(trimmed.rfind(" "), trimmed.rfind("/")) + 1
    return trimmed[:cut]


def handle_launcher_key(key: str, state: SessionState, callbacks: LauncherKeyCallbacks) -> bool:
    """Handle one key token; returns ``True`` when the session should end."""
    selection = callbacks.selection

    if key in {"ESC", "CTRL_C"}:
        return selection.cancel()
    if key == "ENTER":
        return selection.confirm()

    if key in {"UP", "CTRL_P"}:
        selection.move_up()
        return False
    if key in {"DOWN", "CTRL_N", "TAB"}:
        selection.move_down()
        return False
    if key in {"PAGE_UP", "PAGE_DOWN"}:
        step = max(1, callbacks.visible_list_rows())
        selection.move_by(-step if key == "PAGE_UP" else step)
        return False

    if key == "BACKSPACE":
        _set_query(state, state.query_text[:-1], callbacks.on_text_changed)
        return False
    if key == "CTRL_U":
        _set_query(state, "", callbacks.on_text_changed)
        return False
    if key == "CTRL_W":
        _set_query(state, _delete_last_word(state.query_text), callbacks.on_text_changed)
        return False

    if key.startswith("MOUSE_WHEEL_UP:"):
        selection.move_up()
        return False
    if key.startswith("MOUSE_WHEEL_DOWN:"):
        selection.move_down()
        return False
    if key.startswith("MOUSE_MOVE:") or key.startswith("MOUSE_LEFT_DOWN:"):
        _col, row = parse_mouse_col_row(key)
        if row is None:
            return False
        idx = result_index_for_row(row, state.list_start, callbacks.visible_list_rows())
        if idx is None or not (0 <= idx < len(state.results)):
            return False
        selection.hover(idx)
        if key.startswith("MOUSE_LEFT_DOWN:"):
            return selection.confirm()
        return False

    if len(key) == 1 and key.isprintable() and key != "\ufffd":
        _set_query(state, state.query_text + key, callbacks.on_text_changed)
    return False
