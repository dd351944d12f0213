"""Startup banner — status output printed before the server starts.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback to plain text.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdpreview.config import PreviewConfig


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


def print_banner(
    config: PreviewConfig,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the mdpreview startup banner to stderr.

    Args:
        config: Validated PreviewConfig.
        load_ms: Time spent on startup in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from mdpreview import __version__

    lines: list[str] = [
        "",
        f"  {_BOLD}mdpreview{_RESET} {_DIM}v{__version__}{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} file: {config.file}{timing}")
    lines.append(
        f"  {_DIM}├─{_RESET} polling every {config.poll_interval * 1000:.0f}ms"
    )
    lines.append(
        f"  {_DIM}└─{_RESET} {_GREEN}live{_RESET} "
        f"— SSE on {_DIM}/__mdpreview/events{_RESET}"
    )

    lines.append("")
    lines.append(f"  Serving file on {_clickable_url(config.url)}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
