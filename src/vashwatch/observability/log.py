"""Event log — the watch history, bounded and queryable.

The watcher thread records changes while the event loop records cache
updates and triggers, so every access goes through one ``threading.Lock``.
Once ``max_events`` is reached the oldest events fall off.
"""

import threading
from collections import Counter, deque

from vashwatch.observability.events import (
    CacheUpdated,
    CacheUpdateFailed,
    StackEvent,
    TaskTriggered,
    WatchWarning,
)


def _location(event: StackEvent) -> str:
    """Path an event concerns; warnings carry theirs in ``detail``."""
    if isinstance(event, TaskTriggered):
        return ""
    if isinstance(event, WatchWarning):
        return event.detail
    return event.path


class EventLog:
    """Ring buffer of watch events.

    Args:
        max_events: Number of events kept before the oldest are dropped.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 5_000) -> None:
        self._max_events = max_events
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        with self._lock:
            self._events.append(event)

    def _snapshot(self) -> list[StackEvent]:
        with self._lock:
            return list(self._events)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        name: str | None = None,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Matching events, newest first.

        Args:
            event_type: Keep only instances of this event class.
            since_ns: Keep only events stamped at or after this time.
            path: Keep only events whose path (or warning detail) contains it.
            name: Keep only cache updates for this cache key.
            limit: Stop after this many matches.

        """
        matches: list[StackEvent] = []
        for event in reversed(self._snapshot()):
            if len(matches) == limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if path is not None and path not in _location(event):
                continue
            if name is not None and not (
                isinstance(event, CacheUpdated) and event.name == name
            ):
                continue
            matches.append(event)
        return matches

    def recent(self, n: int = 20) -> list[StackEvent]:
        """The last ``n`` events, oldest first."""
        return self._snapshot()[-n:]

    def failures(self) -> list[CacheUpdateFailed]:
        """Every recorded cache update failure, oldest first."""
        return [e for e in self._snapshot() if isinstance(e, CacheUpdateFailed)]

    def warnings(self) -> list[WatchWarning]:
        """Every recorded warning, oldest first."""
        return [e for e in self._snapshot() if isinstance(e, WatchWarning)]

    def triggers(self) -> list[TaskTriggered]:
        """Every downstream task run, oldest first."""
        return [e for e in self._snapshot() if isinstance(e, TaskTriggered)]

    def clear(self) -> int:
        """Drop every event; returns how many were dropped."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, object]:
        """Event counts per type, plus buffer size and capacity."""
        events = self._snapshot()
        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": dict(Counter(type(e).__name__ for e in events)),
            "updated_templates": len(
                {e.name for e in events if isinstance(e, CacheUpdated)}
            ),
        }
