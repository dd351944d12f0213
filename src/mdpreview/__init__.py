"""mdpreview — live browser preview for a single Markdown file.

Watches one file, renders it to HTML with Patitas whenever its modification
time changes, and pushes the result to every connected browser over
Server-Sent Events.

Quick start::

    import mdpreview

    mdpreview.preview("README.md")

Or from the shell::

    mdpreview README.md --port 8080

Building blocks, for embedding or testing::

    BroadcastChannel    latest-value fan-out (one writer, many readers)
    ChangeDetector      polls the file, renders, publishes
    ConnectionHandler   forwards channel updates to one client
    MarkdownRenderer    Markdown source -> HTML

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "BroadcastChannel",
    "ChangeDetector",
    "ConnectionHandler",
    "MarkdownRenderer",
    "PreviewConfig",
    "__version__",
    "preview",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import mdpreview`` fast; Chirp and Patitas are only imported
    when the server or renderer is actually used.
    """
    if name == "PreviewConfig":
        from mdpreview.config import PreviewConfig

        return PreviewConfig

    if name == "preview":
        from mdpreview.app import preview

        return preview

    if name == "BroadcastChannel":
        from mdpreview.reactive.channel import BroadcastChannel

        return BroadcastChannel

    if name == "ConnectionHandler":
        from mdpreview.reactive.handler import ConnectionHandler

        return ConnectionHandler

    if name == "ChangeDetector":
        from mdpreview.content.detector import ChangeDetector

        return ChangeDetector

    if name == "MarkdownRenderer":
        from mdpreview.content.renderer import MarkdownRenderer

        return MarkdownRenderer

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
