"""Event model for preview observability.

Defines event types for the watch → render → broadcast pipeline and for
client connections.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Watch / render events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RenderCompleted:
    """The watched file was rendered and the result published.

    Attributes:
        path: Absolute path to the watched file.
        version: Channel version assigned to the published HTML.
        source_chars: Length of the Markdown source.
        html_chars: Length of the rendered HTML.
        render_ms: Time spent rendering in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    version: int
    source_chars: int
    html_chars: int
    render_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RenderFailed:
    """A render attempt failed; the previous output stays live."""

    path: str
    error: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class WatchFailed:
    """The watched file could not be accessed.  Fatal to the process."""

    path: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Connection events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClientConnected:
    """A browser opened a live connection.

    Attributes:
        client_id: Unique identifier for the connection.
        subscribers: Open subscriptions after this client joined.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    client_id: str
    subscribers: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ClientDisconnected:
    """A live connection ended.

    Attributes:
        client_id: Unique identifier for the connection.
        delivered: Number of updates handed to the client.
        reason: Why the connection ended.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    client_id: str
    delivered: int
    reason: Literal["disconnected", "channel_closed", "transport_error"]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type PreviewEvent = (
    RenderCompleted
    | RenderFailed
    | WatchFailed
    | ClientConnected
    | ClientDisconnected
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
