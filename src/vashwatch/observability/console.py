"""Console output — indented status lines on stderr.

Warnings can be silenced globally (e.g. in test suites) with
``suppress_warnings(True)``; they are still recorded by the collector.
"""

from __future__ import annotations

import sys

_suppressed = False


def suppress_warnings(suppress: bool = True) -> None:
    """Silence (or restore) warning output on stderr."""
    global _suppressed  # noqa: PLW0603
    _suppressed = suppress


def warnings_suppressed() -> bool:
    """Whether warning output is currently silenced."""
    return _suppressed


def format_warning(source: str, message: str, detail: str = "") -> str:
    """Format a warning line: ``  ! source: message (detail)``."""
    line = f"  ! {source}: {message}"
    if detail:
        line = f"{line} ({detail})"
    return line


def warn(source: str, message: str, detail: str = "") -> None:
    """Print a warning to stderr unless warnings are suppressed."""
    if _suppressed:
        return
    print(format_warning(source, message, detail), file=sys.stderr)


def info(message: str) -> None:
    """Print a status line to stderr."""
    print(f"  {message}", file=sys.stderr)
