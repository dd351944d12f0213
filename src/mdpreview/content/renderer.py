"""Markdown renderer — source text to HTML via Patitas.

Stateless apart from the configured Patitas ``Markdown`` instance, which is
built once and reused for every render.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from mdpreview._errors import ConfigError, RenderError

if TYPE_CHECKING:
    from patitas import Markdown


class MarkdownRenderer:
    """Converts Markdown source to HTML.

    Args:
        plugins: Patitas plugin names to enable (tables by default).

    Raises:
        ConfigError: Patitas rejects the plugin configuration.

    """

    __slots__ = ("_md", "_plugins")

    def __init__(self, plugins: Iterable[str] = ("table",)) -> None:
        from patitas import Markdown

        self._plugins = tuple(plugins)
        try:
            self._md: Markdown = Markdown(plugins=list(self._plugins))
        except Exception as exc:
            msg = f"Invalid Markdown plugins {self._plugins!r}: {exc}"
            raise ConfigError(msg) from exc

    @property
    def plugins(self) -> tuple[str, ...]:
        return self._plugins

    def __call__(self, source: str) -> str:
        """Render *source* to HTML.

        Raises:
            RenderError: The parser failed on this input. Only this render
                attempt is affected.

        """
        try:
            return str(self._md(source))
        except Exception as exc:
            msg = f"Failed to render Markdown: {exc}"
            raise RenderError(msg) from exc


_default: MarkdownRenderer | None = None


def render_markdown(source: str) -> str:
    """Render *source* with the default plugin set."""
    global _default  # noqa: PLW0603
    if _default is None:
        _default = MarkdownRenderer()
    return _default(source)
