"""Tests for mdpreview package exports and metadata."""

import pytest

import mdpreview


class TestPackageMetadata:
    """Package-level exports and metadata."""

    def test_version_string(self) -> None:
        assert isinstance(mdpreview.__version__, str)
        assert "0.1.0" in mdpreview.__version__

    def test_free_threading_declaration(self) -> None:
        assert mdpreview._Py_mod_gil == 0

    def test_all_exports_resolvable(self) -> None:
        for name in mdpreview.__all__:
            getattr(mdpreview, name)

    def test_lazy_exports_are_the_real_classes(self) -> None:
        from mdpreview.reactive.channel import BroadcastChannel

        assert mdpreview.BroadcastChannel is BroadcastChannel

    def test_invalid_attribute_raises(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            mdpreview.nonexistent_thing  # type: ignore[attr-defined]  # noqa: B018
