"""Template cache — the artifact the scheduler keeps up to date."""

from vashwatch.cache.updater import (
    CacheUpdateParams,
    CacheUpdater,
    CacheUpdateResult,
    JsonTemplateCache,
    read_cache,
)

__all__ = [
    "CacheUpdateParams",
    "CacheUpdateResult",
    "CacheUpdater",
    "JsonTemplateCache",
    "read_cache",
]
