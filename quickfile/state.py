from __future__ import annotations

from dataclasses import dataclass, field

from .protocol import ResponseSnapshot


@dataclass
class SessionState:
    query_text: str = ""
    last_dispatched_query: str | None = None
    selected_index: int = 0
    snapshot: ResponseSnapshot = field(default_factory=ResponseSnapshot.empty)
    transport_connected: bool = False
    list_start: int = 0
    usable: int = 24
    dirty: bool = True
    status_message: str = ""
    status_message_until: float = 0.0
    skip_next_lf: bool = False

    @property
    def results(self):
        return self.snapshot.results

    @property
    def query_pending(self) -> bool:
        return self.last_dispatched_query != self.query_text
