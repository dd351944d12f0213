"""Change detector — polls the watched file and publishes fresh renders.

Compares the file's modification time against the last one seen on a fixed
interval.  When it moved, the whole file is read, rendered, and the HTML is
published to the broadcast channel.  Change detection is timestamp driven:
touching the file with identical content still triggers a render.

Updates reach the channel at most one interval after the write.

Failure policy:
- File missing or unreadable -> ``FileAccessError`` out of ``check()`` and
  ``run()``.  Fatal: the caller is expected to stop the process.
- Render failure -> logged, previous output stays live, polling continues.
  The timestamp is still recorded so an unchanged broken file is not
  re-rendered on every tick.
"""

from __future__ import annotations

import asyncio
import os
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from mdpreview._errors import FileAccessError, RenderError
from mdpreview.config import DEFAULT_POLL_INTERVAL

if TYPE_CHECKING:
    from mdpreview.observability.collector import PreviewCollector
    from mdpreview.reactive.channel import BroadcastChannel

# Earlier than any real st_mtime_ns, so the first check always renders.
MTIME_SENTINEL = -1

type DetectorState = Literal["idle", "checking"]


class ChangeDetector:
    """Watches one file by polling its modification time.

    Args:
        path: The watched file.
        channel: Where rendered HTML is published.
        renderer: Markdown source -> HTML.  Defaults to ``render_markdown``.
        interval: Seconds between checks.
        collector: Optional event collector.

    """

    def __init__(
        self,
        path: str | Path,
        channel: BroadcastChannel,
        renderer: Callable[[str], str] | None = None,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        collector: PreviewCollector | None = None,
    ) -> None:
        if renderer is None:
            from mdpreview.content.renderer import render_markdown

            renderer = render_markdown
        self._path = Path(path)
        self._channel = channel
        self._renderer = renderer
        self._interval = interval
        self._collector = collector
        self._last_mtime_ns = MTIME_SENTINEL
        self._state: DetectorState = "idle"
        self._ticks = 0
        self._renders = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def state(self) -> DetectorState:
        """``"checking"`` while a tick is in progress, ``"idle"`` otherwise."""
        return self._state

    @property
    def last_mtime_ns(self) -> int:
        return self._last_mtime_ns

    @property
    def ticks(self) -> int:
        """Number of completed checks."""
        return self._ticks

    @property
    def renders(self) -> int:
        """Number of render attempts (successful or not)."""
        return self._renders

    async def check(self) -> bool:
        """Run one tick.

        Returns:
            True if the file had changed and a render cycle ran.

        Raises:
            FileAccessError: The file could not be stat'ed or read.

        """
        self._state = "checking"
        try:
            return await self._check()
        except FileAccessError as exc:
            if self._collector is not None:
                self._collector.record_watch_failure(str(self._path), exc)
            raise
        finally:
            self._state = "idle"
            self._ticks += 1

    async def _check(self) -> bool:
        mtime_ns = await asyncio.to_thread(self._stat)
        if mtime_ns == self._last_mtime_ns:
            return False

        source = await asyncio.to_thread(self._read)
        self._renders += 1
        t0 = time.perf_counter()
        try:
            html = self._renderer(source)
        except RenderError as exc:
            print(f"  Render error: {self._path.name}: {exc}", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_render_failure(str(self._path), exc)
        else:
            render_ms = (time.perf_counter() - t0) * 1000
            version = self._channel.publish(html)
            if self._collector is not None:
                self._collector.record_render(
                    str(self._path),
                    version=version,
                    source_chars=len(source),
                    html_chars=len(html),
                    render_ms=render_ms,
                )

        self._last_mtime_ns = mtime_ns
        return True

    async def run(
        self,
        stop: asyncio.Event | None = None,
        *,
        max_ticks: int | None = None,
    ) -> None:
        """Poll until *stop* is set, *max_ticks* checks ran, or the task is cancelled.

        The first check happens immediately; later ones are spaced by the
        interval.  Setting *stop* interrupts the wait between checks.

        Raises:
            FileAccessError: The watched file was lost.  Polling stops.

        """
        if stop is None:
            stop = asyncio.Event()

        ticks = 0
        while not stop.is_set():
            await self.check()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                return
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._interval)
            except TimeoutError:
                pass

    def _stat(self) -> int:
        try:
            return os.stat(self._path).st_mtime_ns
        except OSError as exc:
            msg = f"could not read metadata of {self._path}: {exc}"
            raise FileAccessError(msg) from exc

    def _read(self) -> str:
        try:
            return self._path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            msg = f"could not read {self._path}: {exc}"
            raise FileAccessError(msg) from exc
