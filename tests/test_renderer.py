"""Tests for mdpreview.content.renderer — Markdown to HTML via Patitas."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from mdpreview._errors import ConfigError, RenderError
from mdpreview.content.renderer import MarkdownRenderer, render_markdown


class TestMarkdownRenderer:
    """MarkdownRenderer wraps a configured patitas.Markdown."""

    def test_heading(self) -> None:
        html = MarkdownRenderer()("# Hello")
        assert "<h1" in html
        assert "Hello</h1>" in html

    def test_paragraph_and_emphasis(self) -> None:
        html = MarkdownRenderer()("Some *emphasis* here.")
        assert "<p>" in html
        assert "<em>emphasis</em>" in html

    def test_deterministic(self) -> None:
        renderer = MarkdownRenderer()
        source = "# Title\n\n- one\n- two\n"
        assert renderer(source) == renderer(source)

    def test_empty_source(self) -> None:
        assert MarkdownRenderer()("").strip() == ""

    def test_table_plugin_enabled_by_default(self) -> None:
        renderer = MarkdownRenderer()
        assert renderer.plugins == ("table",)
        html = renderer("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<table" in html

    def test_parser_failure_becomes_render_error(self) -> None:
        renderer = MarkdownRenderer()
        with (
            patch.object(renderer, "_md", side_effect=ValueError("boom")),
            pytest.raises(RenderError, match="boom"),
        ):
            renderer("# Hello")

    def test_invalid_plugin_configuration(self) -> None:
        with (
            patch("patitas.Markdown", side_effect=ValueError("unknown plugin")),
            pytest.raises(ConfigError, match="unknown plugin"),
        ):
            MarkdownRenderer(plugins=("nope",))


class TestRenderMarkdown:
    """Module-level convenience function."""

    def test_renders(self) -> None:
        html = render_markdown("## Section")
        assert "<h2" in html
        assert "Section</h2>" in html
