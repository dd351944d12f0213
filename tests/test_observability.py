"""Tests for mdpreview.observability — event model, log, collector."""

from __future__ import annotations

import pytest

from mdpreview.observability import (
    ClientConnected,
    ClientDisconnected,
    EventLog,
    PreviewCollector,
    RenderCompleted,
    RenderFailed,
    WatchFailed,
    now_ns,
)


def _render(path: str = "/a.md", version: int = 1, ts: int = 0) -> RenderCompleted:
    return RenderCompleted(
        path=path,
        version=version,
        source_chars=1,
        html_chars=2,
        render_ms=0.1,
        timestamp_ns=ts or now_ns(),
    )


class TestEvents:
    """Events are frozen dataclasses."""

    def test_frozen(self) -> None:
        event = _render()
        with pytest.raises(AttributeError):
            event.version = 2  # type: ignore[misc]

    def test_now_ns_monotonic(self) -> None:
        a = now_ns()
        b = now_ns()
        assert b >= a


class TestEventLog:
    """EventLog — bounded, queryable store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        log.append(_render())
        log.append(_render(version=2))
        assert len(log) == 2

    def test_ring_buffer_drops_oldest(self) -> None:
        log = EventLog(max_events=3)
        for v in range(1, 6):
            log.append(_render(version=v))
        assert [e.version for e in log.recent()] == [3, 4, 5]  # type: ignore[union-attr]

    def test_query_by_type_newest_first(self) -> None:
        log = EventLog()
        log.append(_render(version=1))
        log.append(ClientConnected(client_id="c", subscribers=1, timestamp_ns=now_ns()))
        log.append(_render(version=2))

        renders = log.query(event_type=RenderCompleted)
        assert [e.version for e in renders] == [2, 1]  # type: ignore[union-attr]

    def test_query_by_path(self) -> None:
        log = EventLog()
        log.append(_render(path="/docs/a.md"))
        log.append(_render(path="/docs/b.md"))
        log.append(ClientConnected(client_id="c", subscribers=1, timestamp_ns=now_ns()))

        results = log.query(path="b.md")
        assert len(results) == 1

    def test_query_since_and_limit(self) -> None:
        log = EventLog()
        for ts in (10, 20, 30, 40):
            log.append(_render(ts=ts))
        assert len(log.query(since_ns=25)) == 2
        assert len(log.query(limit=1)) == 1

    def test_stats(self) -> None:
        log = EventLog(max_events=50)
        log.append(_render())
        log.append(RenderFailed(path="/a.md", error="x", timestamp_ns=now_ns()))
        log.append(RenderFailed(path="/a.md", error="y", timestamp_ns=now_ns()))

        stats = log.stats()
        assert stats["total"] == 3
        assert stats["max_events"] == 50
        assert stats["by_type"] == {"RenderCompleted": 1, "RenderFailed": 2}


class TestPreviewCollector:
    """PreviewCollector — typed recording helpers."""

    def test_creates_log_when_omitted(self) -> None:
        assert isinstance(PreviewCollector().log, EventLog)

    def test_uses_given_log(self) -> None:
        log = EventLog()
        assert PreviewCollector(log).log is log

    def test_record_methods(self) -> None:
        collector = PreviewCollector()
        collector.record_render("/a.md", version=3, source_chars=5, html_chars=9, render_ms=1.5)
        collector.record_render_failure("/a.md", ValueError("bad"))
        collector.record_watch_failure("/a.md", OSError("gone"))
        collector.record_connect("c1", subscribers=2)
        collector.record_disconnect("c1", delivered=4, reason="disconnected")

        log = collector.log
        assert log.query(event_type=RenderCompleted)[0].version == 3  # type: ignore[union-attr]
        assert log.query(event_type=RenderFailed)[0].error == "bad"  # type: ignore[union-attr]
        assert log.query(event_type=WatchFailed)[0].error == "gone"  # type: ignore[union-attr]
        assert log.query(event_type=ClientConnected)[0].subscribers == 2  # type: ignore[union-attr]
        assert log.query(event_type=ClientDisconnected)[0].delivered == 4  # type: ignore[union-attr]
