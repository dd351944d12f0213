"""Connection handler — forwards channel updates to one live client.

Each browser connection gets its own handler wrapping a fresh
:class:`~mdpreview.reactive.channel.Subscription`.  The handler never
triggers a render; it only reflects what the detector publishes.

Two ways to drive it:

- ``stream()`` — async generator for pull-style transports (Chirp's
  ``EventStream`` iterates it and writes each value as an SSE event).
- ``run(send)`` — push-style loop for transports exposing an async send.

Either way the subscription is released when the loop ends, whether the
client went away, the send failed, or the channel was closed.
"""

from __future__ import annotations

import sys
import uuid
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Literal

from mdpreview._errors import TransportError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from mdpreview.observability.collector import PreviewCollector
    from mdpreview.reactive.channel import Subscription

type Send = Callable[[str], Awaitable[object]]
type EndReason = Literal["disconnected", "channel_closed", "transport_error"]


class ConnectionHandler:
    """Per-client session pushing each new rendered value to the client.

    Args:
        subscription: Fresh subscription owned by this handler from now on.
        client_id: Identifier used in log output and events.
        collector: Optional event collector.

    """

    def __init__(
        self,
        subscription: Subscription,
        *,
        client_id: str | None = None,
        collector: PreviewCollector | None = None,
    ) -> None:
        self._subscription = subscription
        self._client_id = client_id or uuid.uuid4().hex[:12]
        self._collector = collector
        self._delivered = 0
        self._error: TransportError | None = None
        self._started = False

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def delivered(self) -> int:
        """Number of updates handed to the client's transport."""
        return self._delivered

    @property
    def error(self) -> TransportError | None:
        """The transport failure that ended the loop, if any."""
        return self._error

    @property
    def subscription(self) -> Subscription:
        return self._subscription

    async def stream(self) -> AsyncIterator[str]:
        """Yield every new value until the channel closes or the consumer stops.

        Closing the generator (client disconnect) or cancelling the task that
        iterates it releases the subscription.
        """
        self._open()
        reason: EndReason = "disconnected"
        try:
            async for html in self._subscription:
                self._delivered += 1
                yield html
            reason = "channel_closed"
        finally:
            self._close(reason)

    async def run(self, send: Send) -> None:
        """Forward values through *send* until it fails or the channel closes.

        A failing send is scoped to this client: it is logged, kept on
        ``error`` and ends the loop without raising.
        """
        self._open()
        reason: EndReason = "disconnected"
        try:
            async for html in self._subscription:
                try:
                    await send(html)
                except Exception as exc:
                    error = TransportError(
                        f"could not send update to client {self._client_id}: {exc}"
                    )
                    error.__cause__ = exc
                    self._error = error
                    reason = "transport_error"
                    print(f"  Transport error: {error}", file=sys.stderr)
                    return
                self._delivered += 1
            reason = "channel_closed"
        finally:
            self._close(reason)

    def _open(self) -> None:
        if self._started:
            msg = f"handler for client {self._client_id} already started"
            raise RuntimeError(msg)
        self._started = True
        if self._collector is not None:
            self._collector.record_connect(
                self._client_id,
                subscribers=self._subscription.channel.subscriber_count,
            )

    def _close(self, reason: EndReason) -> None:
        self._subscription.close()
        if self._collector is not None:
            self._collector.record_disconnect(
                self._client_id, delivered=self._delivered, reason=reason,
            )
