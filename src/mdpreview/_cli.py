"""mdpreview CLI — mdpreview FILE [--host HOST] [--port PORT].

Entry point for the ``mdpreview`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from mdpreview._errors import ConfigError, PreviewError, StartupError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the mdpreview CLI.

    Options left unset default to None so a config file next to the
    watched file can supply them.
    """
    parser = argparse.ArgumentParser(
        prog="mdpreview",
        description="Live browser preview of a Markdown file.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("file", help="The path to the markdown file to render")
    parser.add_argument(
        "-i", "--host", "--ip",
        dest="host",
        default=None,
        help="The ip to serve the file from (default: 127.0.0.1)",
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help="The port to serve the file from (default: 8080)",
    )
    parser.add_argument(
        "--interval",
        dest="poll_interval",
        type=float,
        default=None,
        help="Seconds between file checks (default: 0.1)",
    )
    parser.add_argument(
        "--no-browser",
        dest="open_browser",
        action="store_const",
        const=False,
        default=None,
        help="Do not open a browser window",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from mdpreview import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from mdpreview.app import preview

    try:
        preview(
            args.file,
            host=args.host,
            port=args.port,
            poll_interval=args.poll_interval,
            open_browser=args.open_browser,
        )
    except (StartupError, ConfigError) as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except PreviewError:
        # Already reported by the session when it happened.
        sys.exit(1)


if __name__ == "__main__":
    main()
