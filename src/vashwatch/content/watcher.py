"""File watcher — the change event source for the update scheduler.

Monitors the configured template and model globs. Each detected change is
classified by suffix:

- ``*.vash`` changed -> template update for that module
- anything else      -> model change, pages named on the command line refresh
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

from vashwatch._errors import WatchError
from vashwatch.content.paths import is_template

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

    from vashwatch.config import WatchConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: What kind of file changed (determines the update path).
        content: File contents read when the change was seen; None if the
            file was deleted or unreadable.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: Literal["template", "model"]
    content: bytes | None = None


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def _matches(rel: PurePath, globs: Iterable[str]) -> bool:
    return any(rel.full_match(pattern) for pattern in globs)


def categorize_change(
    path: Path, config: WatchConfig
) -> Literal["template", "model"] | None:
    """Determine whether a changed file is a watched template or model.

    Returns None if the file matches none of the watched globs.

    """
    try:
        rel = path.relative_to(config.root)
    except ValueError:
        return None

    if not _matches(rel, config.watch_globs):
        return None
    return "template" if is_template(rel) else "model"


def watch_roots(config: WatchConfig) -> list[Path]:
    """Directories to hand to watchfiles: the literal prefix of each glob."""
    roots: list[Path] = []
    for pattern in config.watch_globs:
        prefix: list[str] = []
        for part in PurePath(pattern).parts:
            if any(ch in part for ch in "*?["):
                break
            prefix.append(part)
        root = config.root.joinpath(*prefix)
        # A literal file path is watched through its directory.
        if len(prefix) == len(PurePath(pattern).parts):
            root = root.parent
        if root.exists() and root not in roots:
            roots.append(root)
    return roots or [config.root]


def _read_content(path: Path, kind: str) -> bytes | None:
    if kind == "deleted":
        return None
    try:
        return path.read_bytes()
    except OSError:
        return None


class ContentWatcher:
    """Watches template and model globs and yields change events.

    Uses watchfiles for efficient filesystem monitoring. The watcher runs
    watchfiles in a background thread and bridges events to an asyncio queue
    on the loop that called ``start()``.

    """

    def __init__(self, config: WatchConfig) -> None:
        self._config = config
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching for file changes in a background thread.

        Must be called from a running event loop.

        """
        if self.is_running:
            return

        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            msg = "ContentWatcher.start() must be called from a running event loop"
            raise WatchError(msg) from exc
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="vashwatch-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Async iterator that yields ChangeEvent objects as they occur.

        Blocks until a change is available or the watcher is stopped.

        """
        while self.is_running or not self._queue.empty():
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=0.5)
                yield event
            except TimeoutError:
                if not self.is_running:
                    break

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and push events to the queue."""
        from watchfiles import watch

        for raw_changes in watch(
            *watch_roots(self._config),
            stop_event=self._stop_event,
            debounce=self._config.debounce_ms,
            step=100,
        ):
            for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
                path = Path(path_str)
                category = categorize_change(path, self._config)
                if category is None:
                    continue

                kind = _CHANGE_KIND_MAP.get(change_type, "modified")
                event = ChangeEvent(
                    path=path,
                    kind=kind,
                    category=category,
                    content=_read_content(path, kind),
                )
                self._emit(event)

    def _emit(self, event: ChangeEvent) -> None:
        # asyncio.Queue is not thread-safe; hand over on the loop's thread.
        if self._loop is None:
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)
        except RuntimeError:
            pass  # Loop closed while the thread was shutting down
