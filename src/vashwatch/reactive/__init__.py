"""Reactive layer — from file changes to serialized cache updates.

Connects watcher events to the cache updater through the watch session and
the update scheduler.
"""

from vashwatch.reactive.scheduler import Trigger, UpdateRequest, UpdateScheduler
from vashwatch.reactive.session import WatchSession

__all__ = [
    "Trigger",
    "UpdateRequest",
    "UpdateScheduler",
    "WatchSession",
]
