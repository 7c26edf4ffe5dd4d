"""vashwatch error hierarchy.

All vashwatch-specific errors inherit from VashWatchError for easy catching.
"""


class VashWatchError(Exception):
    """Base error for all vashwatch operations."""


class ConfigError(VashWatchError):
    """Invalid or missing configuration."""


class CacheError(VashWatchError):
    """Error while updating or precompiling the template cache."""


class TaskError(VashWatchError):
    """A downstream task could not be resolved or run."""


class WatchError(VashWatchError):
    """Error in the watch lifecycle (starting, stopping, consuming events)."""
