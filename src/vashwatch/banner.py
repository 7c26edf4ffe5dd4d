"""Startup banner — status output when a watch starts.

Prints what is being watched and which tasks run after updates.  Detects
``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vashwatch.config import WatchConfig


# ---------------------------------------------------------------------------
# ANSI helpers (NO_COLOR aware, https://no-color.org)
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
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def format_banner(
    config: WatchConfig,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> str:
    """Build the banner text (without trailing newline)."""
    from vashwatch import __version__

    mode = "debug" if config.debug_mode else "production"
    lines: list[str] = [
        "",
        f"  {_BOLD}vashwatch{_RESET} {_DIM}v{__version__}{_RESET}  {_GREEN}[{mode}]{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    templates = _plural(len(config.vash_src), "template glob")
    lines.append(f"  {_DIM}├─{_RESET} {templates}{timing}")
    lines.append(f"  {_DIM}├─{_RESET} {_plural(len(config.model_src), 'model glob')}")
    lines.append(f"  {_DIM}├─{_RESET} cache: {_DIM}{config.cache_path}{_RESET}")
    lines.append(f"  {_DIM}├─{_RESET} module types: {', '.join(config.dir_types)}")

    render = config.page_render_task or "none"
    lines.append(f"  {_DIM}└─{_RESET} render task: {render}")

    lines.append("")
    lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    return "\n".join(lines)


def print_banner(
    config: WatchConfig,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the startup banner to stderr.

    Args:
        config: Resolved WatchConfig.
        load_ms: Time spent on the initial task sequence in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    print(format_banner(config, load_ms=load_ms, warnings=warnings) + "\n", file=sys.stderr)
