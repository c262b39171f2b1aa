# tests/unit/test_trace_sink.py
"""Tests for the bounded trace buffer."""

import threading

import pytest

from maximo_gateway.trace import TraceEvent, TraceKind, TraceSink


class TestAppend:
    """Test event recording."""

    def test_append_returns_event(self):
        sink = TraceSink()

        event = sink.append(TraceKind.RX_AGENT, "hello", meta={"provider": "openai"}, tenant="acme")

        assert isinstance(event, TraceEvent)
        assert event.kind is TraceKind.RX_AGENT
        assert event.payload == "hello"
        assert event.meta == {"provider": "openai"}
        assert event.tenant == "acme"
        assert event.timestamp.tzinfo is not None
        assert len(sink) == 1

    def test_kind_accepts_string(self):
        sink = TraceSink()

        event = sink.append("tx_registry", {"tool": "x"})

        assert event.kind is TraceKind.TX_REGISTRY

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            TraceSink().append("sideways", "x")

    def test_long_strings_truncated(self):
        sink = TraceSink(max_payload_chars=5)

        event = sink.append(TraceKind.RX_PROVIDER, {"body": "abcdefghij", "n": 3, "list": ["123456"]})

        assert event.payload == {"body": "abcde…", "n": 3, "list": ["12345…"]}

    def test_events_are_immutable(self):
        event = TraceSink().append(TraceKind.TX_AGENT, "x")

        with pytest.raises(Exception):
            event.payload = "y"

    def test_invalid_capacity(self):
        with pytest.raises(ValueError, match="capacity"):
            TraceSink(capacity=0)


class TestReadRecent:
    """Test bounded, ordered reads."""

    def _filled(self, n, capacity=500):
        sink = TraceSink(capacity=capacity)
        for i in range(n):
            sink.append(TraceKind.TX_PROVIDER, f"event-{i}")
        return sink

    def test_oldest_evicted_first(self):
        """Only the newest `capacity` events survive."""
        sink = self._filled(12, capacity=10)

        events = sink.read_recent()

        assert len(events) == 10
        assert events[0].payload == "event-2"
        assert events[-1].payload == "event-11"

    def test_limit_returns_most_recent_oldest_first(self):
        events = self._filled(10).read_recent(limit=3)

        assert [e.payload for e in events] == ["event-7", "event-8", "event-9"]

    def test_newest_first(self):
        events = self._filled(10).read_recent(limit=2, newest_first=True)

        assert [e.payload for e in events] == ["event-9", "event-8"]

    def test_limit_capped_at_capacity(self):
        events = self._filled(20, capacity=5).read_recent(limit=1000)

        assert len(events) == 5

    def test_zero_limit(self):
        assert self._filled(3).read_recent(limit=0) == []

    def test_kind_filter_applies_before_limit(self):
        sink = TraceSink()
        for i in range(5):
            sink.append(TraceKind.TX_REGISTRY, f"tx-{i}")
            sink.append(TraceKind.RX_REGISTRY, f"rx-{i}")

        events = sink.read_recent(limit=2, kind="rx_registry")

        assert [e.payload for e in events] == ["rx-3", "rx-4"]

    def test_read_is_snapshot(self):
        sink = self._filled(2)
        events = sink.read_recent()

        sink.append(TraceKind.TX_AGENT, "later")

        assert len(events) == 2

    def test_clear(self):
        sink = self._filled(4)

        sink.clear()

        assert len(sink) == 0
        assert sink.read_recent() == []


class TestConcurrency:
    """Concurrent writers never lose or corrupt events."""

    def test_threaded_appends(self):
        sink = TraceSink(capacity=10_000)

        def writer(n):
            for i in range(250):
                sink.append(TraceKind.TOOL_ARGS, f"{n}:{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        events = sink.read_recent()
        assert len(events) == 2000
        assert len({e.payload for e in events}) == 2000
