from __future__ import annotations

import unittest

from quickfile.debounce import DEBOUNCE_SECONDS, DebounceController
from quickfile.protocol import SearchRequest
from quickfile.state import SessionState


class _FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class _FakeSink:
    def __init__(self, connected: bool = True, accept: bool = True) -> None:
        self.connected = connected
        self.accept = accept
        self.sent: list[SearchRequest] = []

    def send(self, request: SearchRequest) -> bool:
        if not self.accept:
            self.connected = False
            return False
        self.sent.append(request)
        return True


def _type(state: SessionState, debounce: DebounceController, text: str) -> None:
    state.query_text = text
    debounce.on_text_changed()


class DebounceTests(unittest.TestCase):
    def test_burst_of_edits_dispatches_once_with_final_text(self) -> None:
        clock = _FakeClock()
        state = SessionState()
        sink = _FakeSink()
        debounce = DebounceController(state, sink, clock=clock)

        for text in ["m", "ma", "mai", "main"]:
            _type(state, debounce, text)
            clock.advance(DEBOUNCE_SECONDS / 2)
            self.assertFalse(debounce.poll())

        clock.advance(DEBOUNCE_SECONDS)
        self.assertTrue(debounce.poll())

        self.assertEqual(sink.sent, [SearchRequest.search("main", 100)])
        self.assertEqual(state.last_dispatched_query, "main")
        self.assertFalse(debounce.armed)

    def test_timeout_reports_remaining_quiet_period(self) -> None:
        clock = _FakeClock()
        state = SessionState()
        debounce = DebounceController(state, _FakeSink(), delay=0.1, clock=clock)

        self.assertIsNone(debounce.timeout())
        _type(state, debounce, "a")
        clock.advance(0.04)
        self.assertAlmostEqual(debounce.timeout(), 0.06)
        clock.advance(1.0)
        self.assertEqual(debounce.timeout(), 0.0)

    def test_reverting_to_dispatched_text_sends_nothing(self) -> None:
        clock = _FakeClock()
        state = SessionState(query_text="ab", last_dispatched_query="ab")
        sink = _FakeSink()
        debounce = DebounceController(state, sink, clock=clock)

        _type(state, debounce, "abc")
        clock.advance(0.05)
        _type(state, debounce, "ab")
        clock.advance(DEBOUNCE_SECONDS)

        self.assertFalse(debounce.poll())
        self.assertEqual(sink.sent, [])

    def test_not_connected_holds_query_without_sending(self) -> None:
        clock = _FakeClock()
        state = SessionState()
        sink = _FakeSink(connected=False)
        debounce = DebounceController(state, sink, clock=clock)

        _type(state, debounce, "abc")
        clock.advance(DEBOUNCE_SECONDS)

        self.assertFalse(debounce.poll())
        self.assertEqual(sink.sent, [])
        self.assertIsNone(state.last_dispatched_query)
        self.assertTrue(state.query_pending)

    def test_failed_send_marks_disconnected(self) -> None:
        clock = _FakeClock()
        state = SessionState(transport_connected=True)
        sink = _FakeSink(accept=False)
        debounce = DebounceController(state, sink, clock=clock)

        _type(state, debounce, "x")
        clock.advance(DEBOUNCE_SECONDS)

        self.assertFalse(debounce.poll())
        self.assertFalse(state.transport_connected)
        self.assertIsNone(state.last_dispatched_query)

    def test_cancel_disarms_pending_countdown(self) -> None:
        clock = _FakeClock()
        state = SessionState()
        sink = _FakeSink()
        debounce = DebounceController(state, sink, clock=clock)

        _type(state, debounce, "x")
        debounce.cancel()
        clock.advance(1.0)

        self.assertFalse(debounce.poll())
        self.assertEqual(sink.sent, [])


if __name__ == "__main__":
    unittest.main()
