"""Cursor movement and the two terminal transitions of a launcher session."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .state import SessionState

logger = logging.getLogger(__name__)


def clamp_selected_index(index: int, count: int) -> int:
    """Clamp ``index`` into ``[0, count)``, or 0 for an empty list."""
    if count <= 0:
        return 0
    return max(0, min(count - 1, index))


class SelectionController:
    """State-bound selection operations used by key and mouse handlers.

    ``open_file`` is the external open effect; it receives the absolute path
    of the confirmed result and may return an error message.
    """

    def __init__(self, state: SessionState, open_file: Callable[[str], str | None]) -> None:
        self.state = state
        self.open_file = open_file
        self.terminated = False
        self.confirmed_path: str | None = None

    def _set_selected(self, index: int) -> bool:
        previous = self.state.selected_index
        self.state.selected_index = clamp_selected_index(index, len(self.state.results))
        if self.state.selected_index != previous:
            self.state.dirty = True
            return True
        return False

    def move_down(self) -> bool:
        return self._set_selected(self.state.selected_index + 1)

    def move_up(self) -> bool:
        return self._set_selected(self.state.selected_index - 1)

    def move_by(self, delta: int) -> bool:
        return self._set_selected(self.state.selected_index + delta)

    def hover(self, row_index: int) -> bool:
        """Select the row under the pointer; rows past the list are ignored."""
        if not (0 <= row_index < len(self.state.results)):
            return False
        return self._set_selected(row_index)

    def confirm(self) -> bool:
        """Open the selected result and end the session.

        Returns ``True`` when the session terminated. With no results there is
        nothing to open and the session keeps running.
        """
        results = self.state.results
        index = self.state.selected_index
        if not results or not (0 <= index < len(results)):
            return False
        target = results[index].absolute_path
        error = self.open_file(target)
        if error:
            logger.warning("open effect failed for %s: %s", target, error)
        self.confirmed_path = target
        self.terminated = True
        return True

    def cancel(self) -> bool:
        self.terminated = True
        return True
