"""Reactive layer — from published HTML to connected browsers.

Holds the latest render in a broadcast channel and fans it out to one
connection handler per live client.
"""

from mdpreview.reactive.channel import BroadcastChannel, Snapshot, Subscription, wait_for_change
from mdpreview.reactive.handler import ConnectionHandler

__all__ = [
    "BroadcastChannel",
    "ConnectionHandler",
    "Snapshot",
    "Subscription",
    "wait_for_change",
]
