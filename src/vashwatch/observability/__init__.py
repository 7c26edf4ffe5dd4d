"""Watch observability — what the watcher, scheduler and tasks did.

Quick Start:
    >>> from vashwatch.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # Pass collector to vashwatch.watch(..., collector=collector)
    >>> # then inspect log.query(event_type=CacheUpdated)

"""

from vashwatch.observability.collector import StackCollector
from vashwatch.observability.console import suppress_warnings
from vashwatch.observability.events import (
    CacheUpdated,
    CacheUpdateFailed,
    ChangeDetected,
    StackEvent,
    TaskTriggered,
    WatchWarning,
    now_ns,
)
from vashwatch.observability.log import EventLog

__all__ = [
    "CacheUpdateFailed",
    "CacheUpdated",
    "ChangeDetected",
    "EventLog",
    "StackCollector",
    "StackEvent",
    "TaskTriggered",
    "WatchWarning",
    "now_ns",
    "suppress_warnings",
]
