"""Shared test fixtures for mdpreview."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mdpreview._errors import RenderError


@pytest.fixture
def md_file(tmp_path: Path) -> Path:
    """A watched Markdown file containing ``# Hello``."""
    path = tmp_path / "README.md"
    path.write_text("# Hello\n", encoding="utf-8")
    return path


def write_with_mtime(path: Path, text: str, mtime_ns: int) -> None:
    """Write *text* and pin the file's modification time.

    Writes in quick succession can share a timestamp on coarse-grained
    filesystems, so tests set it explicitly.
    """
    path.write_text(text, encoding="utf-8")
    os.utime(path, ns=(mtime_ns, mtime_ns))


def touch_with_mtime(path: Path, mtime_ns: int) -> None:
    """Change only the modification time of *path*."""
    os.utime(path, ns=(mtime_ns, mtime_ns))


class FakeRenderer:
    """Renderer double: wraps source in ``<r>`` and records every call.

    Sources listed in *fail_on* raise ``RenderError``.
    """

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.calls: list[str] = []
        self._fail_on = fail_on

    def __call__(self, source: str) -> str:
        self.calls.append(source)
        if source in self._fail_on:
            msg = f"cannot render {source!r}"
            raise RenderError(msg)
        return f"<r>{source}</r>"


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()
