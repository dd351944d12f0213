"""Broadcast channel — latest-value fan-out from the detector to browsers.

One writer (the change detector) replaces the current rendered HTML; any
number of subscriptions wait for "something newer than what I last saw" and
read the latest value.  Only the newest value is retained, so a slow reader
skips intermediate values instead of building a backlog (last value wins).

Every publish swaps in a fresh ``asyncio.Event`` and sets the old one, so all
tasks waiting at that moment wake up, re-check their watermark and go back to
sleep on the new event if nothing they care about changed.

Thread Safety:
    ``publish`` and ``wait_for_change`` must run on the event loop that owns
    the channel.  The subscription set is guarded by a ``threading.Lock`` so
    ``subscriber_count`` can be read from anywhere.

"""

from __future__ import annotations

import asyncio
import itertools
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mdpreview._errors import ChannelClosed

if TYPE_CHECKING:
    from types import TracebackType


@dataclass(frozen=True, slots=True)
class Snapshot:
    """The current value together with its publish sequence number.

    Version 0 is the initial value; every publish increments it by one.
    """

    version: int
    value: str


class BroadcastChannel:
    """Single-producer, multi-consumer holder of the latest rendered output.

    Args:
        initial: Value held before the first publish (never delivered to
            subscribers as a change).

    """

    def __init__(self, initial: str = "") -> None:
        self._snapshot = Snapshot(version=0, value=initial)
        self._changed = asyncio.Event()
        self._closed = False
        self._subscriptions: set[Subscription] = set()
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    @property
    def current(self) -> str:
        """The latest published value."""
        return self._snapshot.value

    @property
    def version(self) -> int:
        """Number of publishes so far."""
        return self._snapshot.version

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        """Number of open subscriptions."""
        with self._lock:
            return len(self._subscriptions)

    def publish(self, value: str) -> int:
        """Replace the current value and wake every waiter.

        Never blocks: readers are only signalled, not waited for.

        Returns:
            The version number of the new value.

        Raises:
            ChannelClosed: The channel has been closed.

        """
        if self._closed:
            msg = "cannot publish on a closed channel"
            raise ChannelClosed(msg)
        snapshot = Snapshot(version=self._snapshot.version + 1, value=value)
        self._snapshot = snapshot
        self._wake()
        return snapshot.version

    def subscribe(self, *, replay: bool = True) -> Subscription:
        """Create a subscription.

        Args:
            replay: When True, the first ``wait_for_change`` returns the
                current value immediately if anything has been published.
                When False, the subscription only sees the next publish.

        Raises:
            ChannelClosed: The channel has been closed.

        """
        if self._closed:
            msg = "cannot subscribe to a closed channel"
            raise ChannelClosed(msg)
        seen = 0 if replay else self._snapshot.version
        sub = Subscription(self, seen=seen, subscription_id=next(self._ids))
        with self._lock:
            self._subscriptions.add(sub)
        return sub

    def close(self) -> None:
        """Shut the channel down, waking every waiter with ``ChannelClosed``.

        Values published before closing are still delivered to subscribers
        that have not seen them yet.
        """
        if self._closed:
            return
        self._closed = True
        self._wake()

    def _wake(self) -> None:
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def _release(self, sub: Subscription) -> None:
        with self._lock:
            self._subscriptions.discard(sub)


class Subscription:
    """Per-client view of a :class:`BroadcastChannel`.

    Tracks the last version this client observed (its watermark).  Usable as
    an async iterator over changes and as a (sync or async) context manager
    that closes the subscription on exit.
    """

    __slots__ = ("_channel", "_closed", "_seen", "subscription_id")

    def __init__(self, channel: BroadcastChannel, *, seen: int, subscription_id: int) -> None:
        self._channel = channel
        self._seen = seen
        self._closed = False
        self.subscription_id = subscription_id

    def __repr__(self) -> str:
        return (
            f"Subscription(id={self.subscription_id}, seen={self._seen}, "
            f"closed={self._closed})"
        )

    @property
    def channel(self) -> BroadcastChannel:
        return self._channel

    @property
    def seen(self) -> int:
        """Version of the last value returned to this subscriber."""
        return self._seen

    @property
    def closed(self) -> bool:
        return self._closed

    def has_changed(self) -> bool:
        """True if a value newer than the watermark has been published."""
        return not self._closed and self._channel.version > self._seen

    def borrow(self) -> str:
        """Read the latest value without advancing the watermark."""
        return self._channel.current

    async def wait_for_change(self) -> str:
        """Wait for a value newer than the watermark and return it.

        Returns the latest value, skipping anything published in between.

        Raises:
            ChannelClosed: The subscription or the channel was closed.

        """
        channel = self._channel
        while True:
            if self._closed:
                msg = f"subscription {self.subscription_id} is closed"
                raise ChannelClosed(msg)
            snapshot = channel.snapshot
            if snapshot.version > self._seen:
                self._seen = snapshot.version
                return snapshot.value
            if channel.closed:
                msg = "channel closed"
                raise ChannelClosed(msg)
            await channel._changed.wait()

    def close(self) -> None:
        """Release the subscription.  Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._channel._release(self)
        # Wake a task that may be parked in wait_for_change on this handle.
        self._channel._wake()

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> str:
        try:
            return await self.wait_for_change()
        except ChannelClosed:
            raise StopAsyncIteration from None

    def __enter__(self) -> Subscription:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


async def wait_for_change(subscription: Subscription) -> str:
    """Wait until *subscription* has a newer value and return it."""
    return await subscription.wait_for_change()
