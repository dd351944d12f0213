"""mdpreview application — wires the detector, channel and Chirp together.

``LiveSession`` owns the per-run state (channel, detector, collector) and
supervises the detector task.  ``create_app`` builds the Chirp app serving
the preview page and the SSE stream.  ``preview`` is the public entry point.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import signal
import sys
import time
import webbrowser
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mdpreview._errors import ChannelClosed, FileAccessError, PreviewError
from mdpreview.config import PreviewConfig
from mdpreview.config_loader import load_config
from mdpreview.content.detector import ChangeDetector
from mdpreview.observability import PreviewCollector
from mdpreview.reactive.channel import BroadcastChannel
from mdpreview.reactive.handler import ConnectionHandler
from mdpreview.reactive.page import EVENTS_ENDPOINT, RENDER_EVENT, STATS_ENDPOINT, render_page

if TYPE_CHECKING:
    from chirp import App, Request, SSEEvent


def _interrupt_process() -> None:
    """Stop the server the same way Ctrl-C does."""
    signal.raise_signal(signal.SIGINT)


class LiveSession:
    """The watch → render → broadcast pipeline for one server run.

    The detector runs as a background task between ``start()`` and
    ``stop()``.  If it loses the watched file or fails unexpectedly, the
    error is stored on ``failure``, the channel is closed (ending every live
    connection), and the *shutdown* callback is invoked so the server loop
    exits.

    Args:
        config: Validated preview configuration.
        renderer: Markdown source -> HTML.  Defaults to a ``MarkdownRenderer``
            with ``config.plugins``.
        collector: Event collector; a fresh one is created when omitted.
        shutdown: Called once after a fatal detector error.

    """

    def __init__(
        self,
        config: PreviewConfig,
        *,
        renderer: Callable[[str], str] | None = None,
        collector: PreviewCollector | None = None,
        shutdown: Callable[[], None] = _interrupt_process,
    ) -> None:
        if renderer is None:
            from mdpreview.content.renderer import MarkdownRenderer

            renderer = MarkdownRenderer(config.plugins)
        self.config = config
        self.channel = BroadcastChannel()
        self.collector = collector if collector is not None else PreviewCollector()
        self.detector = ChangeDetector(
            config.file,
            self.channel,
            renderer,
            interval=config.poll_interval,
            collector=self.collector,
        )
        self.failure: Exception | None = None
        self._shutdown = shutdown
        self._stop: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Spawn the detector task on the running loop."""
        if self.running:
            return
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self._watch(), name="mdpreview-detector")

    async def wait(self) -> None:
        """Wait for the detector task to finish."""
        if self._task is not None:
            await self._task

    async def stop(self) -> None:
        """Stop polling and close the channel."""
        if self._stop is not None:
            self._stop.set()
        self.channel.close()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)

    async def _watch(self) -> None:
        assert self._stop is not None
        try:
            await self.detector.run(self._stop)
        except FileAccessError as exc:
            self.failure = exc
            print(f"  Error: {exc}", file=sys.stderr)
            self.channel.close()
            self._shutdown()
        except Exception as exc:
            self.failure = exc
            print(f"  Watcher error: {type(exc).__name__}: {exc}", file=sys.stderr)
            self.channel.close()
            self._shutdown()

    def stats(self) -> dict[str, Any]:
        """Snapshot of channel and detector state plus event log summary."""
        return {
            "file": str(self.config.file),
            "version": self.channel.version,
            "subscribers": self.channel.subscriber_count,
            "ticks": self.detector.ticks,
            "renders": self.detector.renders,
            "event_log": self.collector.log.stats(),
            "recent_events": [
                {"type": type(event).__name__, **dataclasses.asdict(event)}
                for event in self.collector.log.recent(10)
            ],
        }


async def live_updates(session: LiveSession) -> AsyncIterator[SSEEvent]:
    """SSE events for one client: the full HTML on every publish.

    The subscription is taken on first iteration, so a stream that is never
    iterated holds none.  Ends immediately if the channel is already closed.
    """
    from chirp import SSEEvent

    try:
        subscription = session.channel.subscribe()
    except ChannelClosed:
        return
    handler = ConnectionHandler(subscription, collector=session.collector)
    async with aclosing(handler.stream()) as updates:
        async for html in updates:
            yield SSEEvent(data=html, event=RENDER_EVENT)


def create_app(config: PreviewConfig, session: LiveSession) -> App:
    """Create the Chirp app serving the preview.

    Routes:
        ``/`` — the preview page.
        ``/__mdpreview/events`` — SSE stream, one ConnectionHandler per client.
        ``/__mdpreview/stats`` — JSON session statistics.

    The detector task is tied to the app lifecycle: started in
    ``on_startup``, stopped in ``on_shutdown``.

    """
    from chirp import App, AppConfig

    app = App(
        config=AppConfig(
            template_dir=config.base_dir,
            debug=False,
            host=config.host,
            port=config.port,
        )
    )

    async def index_handler(request: Request) -> Any:
        from chirp.http.response import Response

        return Response(
            body=render_page(config),
            status=200,
            content_type="text/html; charset=utf-8",
        )

    async def events_handler(request: Request) -> Any:
        from chirp import EventStream

        return EventStream(live_updates(session))

    async def stats_handler(request: Request) -> Any:
        from chirp.http.response import Response

        return Response(
            body=json.dumps(session.stats(), indent=2),
            status=200,
            content_type="application/json",
        )

    index_handler.__name__ = "mdpreview_index"
    events_handler.__name__ = "mdpreview_events"
    stats_handler.__name__ = "mdpreview_stats"

    app.route("/", name="mdpreview:index")(index_handler)
    app.route(EVENTS_ENDPOINT, name="mdpreview:events")(events_handler)
    app.route(STATS_ENDPOINT, name="mdpreview:stats")(stats_handler)

    @app.on_startup
    async def _start_session() -> None:
        await session.start()
        if config.open_browser:
            await asyncio.to_thread(webbrowser.open, config.url)

    @app.on_shutdown
    async def _stop_session() -> None:
        await session.stop()

    return app


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def preview(file: str | Path, **kwargs: object) -> None:
    """Serve a live preview of *file* until interrupted.

    Validates the configuration before anything is started, then runs the
    Chirp app via Pounce.  Returns normally on Ctrl-C.

    Args:
        file: Markdown file to watch.
        **kwargs: Override PreviewConfig fields.

    Raises:
        StartupError: Missing file or invalid address.
        ConfigError: Invalid configuration file or values.
        FileAccessError: The watched file was lost while serving.
        PreviewError: The watcher stopped on an unexpected error.

    """
    from mdpreview.banner import print_banner

    t0 = time.perf_counter()
    config = load_config(file, **kwargs)
    config.validate()

    session = LiveSession(config)
    app = create_app(config, session)
    load_ms = (time.perf_counter() - t0) * 1000

    print_banner(config, load_ms=load_ms)

    try:
        app.run(host=config.host, port=config.port)
    except KeyboardInterrupt:
        pass

    if isinstance(session.failure, PreviewError):
        raise session.failure
    if session.failure is not None:
        msg = f"watcher stopped: {session.failure}"
        raise PreviewError(msg) from session.failure
