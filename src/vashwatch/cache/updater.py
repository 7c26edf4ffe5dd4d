"""Template cache updater.

The cache is a JSON object mapping a template's cache key
(``pg_about/Index``) to its compiled representation. Updating one entry
re-reads the file, replaces the entry and rewrites the file atomically.

Template compilation is pluggable: ``JsonTemplateCache(compile=...)`` receives
the template source and the update parameters and returns the value to store.
The default stores the source unchanged.
"""

from __future__ import annotations

import asyncio
import json
import os
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, TypeAlias

from vashwatch._errors import CacheError
from vashwatch.content.paths import cache_key, get_template_details
from vashwatch.observability import console

if TYPE_CHECKING:
    from vashwatch.config import WatchConfig


@dataclass(frozen=True, slots=True)
class CacheUpdateParams:
    """Everything a cache updater needs to refresh one entry.

    Attributes:
        type: Module type of the template (``pg``, ``wg``...).
        name: Cache key of the entry.
        template_path: Absolute path of the template.
        content: In-memory template source; None means read it from disk.
        models_path: Combined models file, available to the compile hook.
        cache_dest: Path of the JSON cache file.
        debug_mode: Compile with debugging info.

    """

    type: str
    name: str
    template_path: Path
    content: bytes | None
    models_path: Path
    cache_dest: Path
    debug_mode: bool = False


@dataclass(frozen=True, slots=True)
class CacheUpdateResult:
    """Outcome of one cache update."""

    success: bool
    name: str
    message: str = ""


class CacheUpdater(Protocol):
    """Refreshes one cache entry. Completes exactly once per call."""

    async def update(self, params: CacheUpdateParams) -> CacheUpdateResult: ...


CompileHook: TypeAlias = Callable[[str, CacheUpdateParams], str]


def _identity(source: str, params: CacheUpdateParams) -> str:
    return source


def read_cache(cache_dest: Path) -> dict[str, str]:
    """Load the cache file. A missing file is an empty cache."""
    try:
        raw = cache_dest.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    try:
        data = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as exc:
        msg = f"Template cache {cache_dest} is not valid JSON: {exc}"
        raise CacheError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Template cache {cache_dest} must hold a JSON object"
        raise CacheError(msg)
    return data


def write_cache(cache_dest: Path, cache: dict[str, str]) -> None:
    """Write the cache through a temp file so readers never see half a file."""
    cache_dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = cache_dest.with_name(f".{cache_dest.name}.tmp")
    tmp.write_text(json.dumps(cache, sort_keys=True), encoding="utf-8")
    os.replace(tmp, cache_dest)


class JsonTemplateCache:
    """Default cache updater backed by a single JSON file.

    File IO runs in a worker thread. An ``asyncio.Lock`` serializes writers
    that share this instance, in addition to the scheduler's own ordering.

    Args:
        compile: Hook turning template source into the cached value.

    """

    def __init__(self, compile: CompileHook | None = None) -> None:
        self._compile = compile or _identity
        self._lock = asyncio.Lock()

    async def update(self, params: CacheUpdateParams) -> CacheUpdateResult:
        """Refresh the entry for ``params.name``."""
        async with self._lock:
            return await asyncio.to_thread(self._update_sync, params)

    def _update_sync(self, params: CacheUpdateParams) -> CacheUpdateResult:
        try:
            if params.content is not None:
                source = params.content.decode("utf-8")
            else:
                source = params.template_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return CacheUpdateResult(False, params.name, f"Could not read template: {exc}")

        try:
            compiled = self._compile(source, params)
            cache = read_cache(params.cache_dest)
        except Exception as exc:
            return CacheUpdateResult(False, params.name, str(exc))

        cache[params.name] = compiled
        try:
            write_cache(params.cache_dest, cache)
        except OSError as exc:
            return CacheUpdateResult(False, params.name, f"Could not write cache: {exc}")
        return CacheUpdateResult(True, params.name)

    def precompile(
        self,
        config: WatchConfig,
        paths: Iterable[Path] | None = None,
    ) -> int:
        """Compile every template into a fresh cache file.

        Args:
            config: Watch configuration (globs, destinations, dir types).
            paths: Templates to compile. Defaults to every file matching
                ``config.vash_src`` under the root.

        Returns:
            Number of templates written to the cache.

        Raises:
            CacheError: If no template could be compiled, or one fails to read.

        """
        t0 = time.perf_counter()
        if paths is None:
            paths = sorted({p for g in config.vash_src for p in config.root.glob(g)})

        cache: dict[str, str] = {}
        for path in paths:
            try:
                rel = path.relative_to(config.root)
            except ValueError:
                rel = path
            details = get_template_details(rel, config.dir_types)
            if details is None:
                continue
            name = cache_key(details.type, details.module_name, details.file_name)
            params = CacheUpdateParams(
                type=details.type,
                name=name,
                template_path=path,
                content=None,
                models_path=config.models_path,
                cache_dest=config.cache_path,
                debug_mode=config.debug_mode,
            )
            try:
                source = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                msg = f"Could not read template {path}: {exc}"
                raise CacheError(msg) from exc
            cache[name] = self._compile(source, params)

        if not cache:
            msg = "No files were precompiled!"
            raise CacheError(msg)

        write_cache(config.cache_path, cache)
        ms = (time.perf_counter() - t0) * 1000
        label = "template" if len(cache) == 1 else "templates"
        console.info(f"Precompiled {len(cache)} {label} in {ms:.0f}ms")
        return len(cache)
