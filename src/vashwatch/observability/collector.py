"""Stack collector — records watch activity into the event log.

The scheduler, watch session and watcher consumer all report through one
collector, so a single ``EventLog`` holds the full history of a watch.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from vashwatch.observability import console
from vashwatch.observability.events import (
    CacheUpdated,
    CacheUpdateFailed,
    ChangeDetected,
    TaskTriggered,
    WatchWarning,
    now_ns,
)
from vashwatch.observability.log import EventLog


class StackCollector:
    """Unified event collector for a watch.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Watcher events -----

    def record_change(self, path: str, *, category: str, kind: str) -> None:
        """Record a detected file change."""
        self._log.append(
            ChangeDetected(
                path=path,
                category=category,  # type: ignore[arg-type]
                kind=kind,  # type: ignore[arg-type]
                timestamp_ns=now_ns(),
            )
        )

    # ----- Scheduler events -----

    def record_update(
        self,
        name: str,
        path: str,
        *,
        from_disk: bool = False,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a successful cache update."""
        self._log.append(
            CacheUpdated(
                name=name,
                path=path,
                from_disk=from_disk,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_failure(self, path: str, message: str) -> None:
        """Record a failed cache update and warn about it."""
        self._log.append(
            CacheUpdateFailed(path=path, message=message, timestamp_ns=now_ns())
        )
        self.warn(
            "UpdateScheduler",
            "Problem updating the template cache.",
            f"{path}: {message}",
        )

    def record_trigger(
        self, task_name: str, *, requests_drained: int, ok: bool = True
    ) -> None:
        """Record a downstream task run."""
        self._log.append(
            TaskTriggered(
                task_name=task_name,
                requests_drained=requests_drained,
                ok=ok,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Warnings -----

    def warn(self, source: str, message: str, detail: str = "") -> None:
        """Record a recoverable problem and print it to stderr."""
        self._log.append(
            WatchWarning(
                source=source, message=message, detail=detail, timestamp_ns=now_ns(),
            )
        )
        console.warn(source, message, detail)
