"""Content layer — the watched file and its rendering.

Handles change detection (modification-time polling) and Markdown -> HTML
conversion via Patitas.
"""

from mdpreview.content.detector import ChangeDetector
from mdpreview.content.renderer import MarkdownRenderer, render_markdown

__all__ = [
    "ChangeDetector",
    "MarkdownRenderer",
    "render_markdown",
]
