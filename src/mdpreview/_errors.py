"""mdpreview error hierarchy.

All mdpreview-specific errors inherit from PreviewError for easy catching.
"""


class PreviewError(Exception):
    """Base error for all mdpreview operations."""


class ConfigError(PreviewError):
    """Invalid or malformed configuration."""


class StartupError(PreviewError):
    """The server cannot start (missing file, bad address or port)."""


class FileAccessError(PreviewError):
    """The watched file disappeared or became unreadable while serving.

    Fatal: the process stops, since there is nothing left to preview.
    """


class RenderError(PreviewError):
    """Markdown source could not be converted to HTML."""


class TransportError(PreviewError):
    """Delivering an update to one client failed."""


class ChannelClosed(PreviewError):
    """The broadcast channel was shut down."""
