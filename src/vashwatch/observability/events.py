"""Event model for watch observability.

Every cache update, failure, downstream trigger and warning produced while
watching is recorded as a frozen dataclass with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal, TypeAlias


# ---------------------------------------------------------------------------
# Watcher events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChangeDetected:
    """A watched file changed.

    Attributes:
        path: Absolute path of the changed file.
        category: Template or model.
        kind: Type of filesystem change.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    category: Literal["template", "model"]
    kind: Literal["created", "modified", "deleted"]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Scheduler events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CacheUpdated:
    """One cache entry was refreshed.

    Attributes:
        name: Cache key of the template (e.g. ``pg_about/Index``).
        path: Template path handed to the cache updater.
        from_disk: True if the template was re-read from disk.
        duration_ms: Time spent in the cache updater.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    name: str
    path: str
    from_disk: bool
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class CacheUpdateFailed:
    """The cache updater reported or raised a failure.

    Attributes:
        path: Template path handed to the cache updater.
        message: Diagnostic payload.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    message: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class TaskTriggered:
    """A downstream task ran after a drain cycle.

    Attributes:
        task_name: Name of the task.
        requests_drained: Requests processed in the cycle.
        ok: False if the task raised.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    task_name: str
    requests_drained: int
    ok: bool
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class WatchWarning:
    """A recoverable problem was reported.

    Attributes:
        source: Function or component that warned.
        message: Human-readable message.
        detail: Extra diagnostic (a path, an error message), may be empty.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    message: str
    detail: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

StackEvent: TypeAlias = (
    ChangeDetected
    | CacheUpdated
    | CacheUpdateFailed
    | TaskTriggered
    | WatchWarning
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
