"""vashwatch CLI — vashwatch watch / vashwatch precompile.

Entry point for the ``vashwatch`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the vashwatch CLI."""
    parser = argparse.ArgumentParser(
        prog="vashwatch",
        description="Keep a Vash template cache in sync with templates and models.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # vashwatch watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Watch templates and models, updating the cache on change",
    )
    watch_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    watch_parser.add_argument(
        "-p", "--page", action="append", default=[], dest="pages",
        help="Page to refresh when a model changes (repeatable), e.g. home or about/Contact",
    )
    watch_parser.add_argument(
        "--debug", action="store_true", default=None, help="Compile with debugging info",
    )

    # vashwatch precompile
    precompile_parser = subparsers.add_parser(
        "precompile",
        help="Compile every template into the cache once",
    )
    precompile_parser.add_argument(
        "root", nargs="?", default=".", help="Project root directory",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from vashwatch import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from vashwatch._errors import VashWatchError
    from vashwatch.app import precompile, run
    from vashwatch.content.pages import normalize_page_name

    try:
        if args.command == "watch":
            pages = tuple(normalize_page_name(p) for p in args.pages)
            run(root=args.root, page_names=lambda: pages, debug_mode=args.debug)
        elif args.command == "precompile":
            precompile(root=args.root)
    except VashWatchError as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
