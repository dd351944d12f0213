"""Observability — structured events for the preview pipeline.

Records what the change detector and the live connections do:
- **Detector**: renders, render failures, loss of the watched file
- **Connections**: clients connecting and disconnecting

All events are frozen dataclasses with nanosecond timestamps.

Quick Start:
    >>> from mdpreview.observability import EventLog, PreviewCollector
    >>> collector = PreviewCollector(EventLog())
    >>> collector.record_render("/notes/README.md", version=1)
    >>> len(collector.log)
    1

"""

from mdpreview.observability.collector import PreviewCollector
from mdpreview.observability.events import (
    ClientConnected,
    ClientDisconnected,
    PreviewEvent,
    RenderCompleted,
    RenderFailed,
    WatchFailed,
    now_ns,
)
from mdpreview.observability.log import EventLog

__all__ = [
    "ClientConnected",
    "ClientDisconnected",
    "EventLog",
    "PreviewCollector",
    "PreviewEvent",
    "RenderCompleted",
    "RenderFailed",
    "WatchFailed",
    "now_ns",
]
