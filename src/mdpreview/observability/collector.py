"""Preview collector — records pipeline and connection events.

The detector and connection handlers receive a collector (optional) and
report what they do through it; everything lands in one ``EventLog`` that
the ``/__mdpreview/stats`` endpoint summarizes.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import Literal

from mdpreview.observability.events import (
    ClientConnected,
    ClientDisconnected,
    RenderCompleted,
    RenderFailed,
    WatchFailed,
    now_ns,
)
from mdpreview.observability.log import EventLog


class PreviewCollector:
    """Event collector for one preview session.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Watch / render events -----

    def record_render(
        self,
        path: str,
        *,
        version: int,
        source_chars: int = 0,
        html_chars: int = 0,
        render_ms: float = 0.0,
    ) -> None:
        """Record a successful render-and-publish cycle."""
        self._log.append(
            RenderCompleted(
                path=path,
                version=version,
                source_chars=source_chars,
                html_chars=html_chars,
                render_ms=render_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_render_failure(self, path: str, error: BaseException) -> None:
        """Record a failed render attempt."""
        self._log.append(RenderFailed(path=path, error=str(error), timestamp_ns=now_ns()))

    def record_watch_failure(self, path: str, error: BaseException) -> None:
        """Record loss of access to the watched file."""
        self._log.append(WatchFailed(path=path, error=str(error), timestamp_ns=now_ns()))

    # ----- Connection events -----

    def record_connect(self, client_id: str, *, subscribers: int) -> None:
        self._log.append(
            ClientConnected(client_id=client_id, subscribers=subscribers, timestamp_ns=now_ns())
        )

    def record_disconnect(
        self,
        client_id: str,
        *,
        delivered: int,
        reason: Literal["disconnected", "channel_closed", "transport_error"],
    ) -> None:
        self._log.append(
            ClientDisconnected(
                client_id=client_id,
                delivered=delivered,
                reason=reason,
                timestamp_ns=now_ns(),
            )
        )
