"""CLI entrypoint for srcdocs."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import DEFAULT_CONFIG_NAME
from .errors import SrcDocsError
from .logging import configure_logging
from .orchestrator import Orchestrator

_DESCRIPTION = """\
Extracts doc strings into markdown files.

Walks through all files in SOURCE and searches for comments. A comment containing
`@file [path]` on its own line is appended to that path under DEST, creating
directories as needed. `@order [num]` sorts content from lowest to highest order,
ties keeping scan order. Other `@` tags are left out of the output; templates in
the config file can use them (see README.md).
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srcdocs",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d",
        "--dest",
        default=".",
        type=Path,
        help="Root directory where markdown files are generated (defaults to current directory).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show detailed messages about document processing.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Config file with comment syntaxes and templates (defaults to <DEST>/{DEFAULT_CONFIG_NAME}).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be generated without writing them.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "sources",
        nargs="*",
        type=Path,
        metavar="SOURCE",
        help="Source directories or files to extract comments from.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for srcdocs."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator()
    try:
        result = orchestrator.run(
            args.sources,
            args.dest,
            config_path=args.config,
            dry_run=bool(args.dry_run),
        )
    except SrcDocsError as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        parser.exit(1, f"IO Error: {exc}\n")

    if result.dry_run:
        print("Doc files (dry-run):")
        for name in result.documents:
            print(f" - {name}")
    else:
        print("Successfully generated documentation.")


if __name__ == "__main__":
    main(sys.argv[1:])
