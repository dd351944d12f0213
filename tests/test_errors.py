"""Tests for mdpreview._errors."""

from mdpreview._errors import (
    ChannelClosed,
    ConfigError,
    FileAccessError,
    PreviewError,
    RenderError,
    StartupError,
    TransportError,
)


class TestErrorHierarchy:
    """All mdpreview errors inherit from PreviewError."""

    def test_preview_error_is_exception(self) -> None:
        assert issubclass(PreviewError, Exception)

    def test_catch_all_preview_errors(self) -> None:
        """All specific errors are catchable via PreviewError."""
        for error_cls in (
            ConfigError,
            StartupError,
            FileAccessError,
            RenderError,
            TransportError,
            ChannelClosed,
        ):
            try:
                raise error_cls("test")
            except PreviewError:
                pass  # Expected — all caught by base class

    def test_fatal_and_non_fatal_are_distinct(self) -> None:
        assert not issubclass(RenderError, FileAccessError)
        assert not issubclass(TransportError, FileAccessError)
