"""Update scheduler — serializes template cache updates.

File watchers fire several events in the same tick (an editor's "save all"
touches many files at once), but refreshing the shared cache file is not
reentrant.  The scheduler turns that stream into a strict sequence:

    submit(A)  -> idle, start processing A
    submit(B)  -> busy, queue B
    submit(C)  -> busy, queue C
    A done     -> process B
    B done     -> process C
    C done     -> queue empty, run the render task once

At most one cache update is in flight at any time, requests are processed in
arrival order, and the downstream task runs once per drain rather than once per
request.

Lifecycle::

    idle -> processing -> (idle | processing) ... -> stopped

``stop()`` may be called at any point.  An update already handed to the cache
updater is allowed to finish, but its completion neither drains the queue nor
fires the downstream task.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, TypeAlias

from vashwatch.cache.updater import CacheUpdateParams
from vashwatch.content.paths import DEFAULT_FILE_NAME, cache_key
from vashwatch.observability.collector import StackCollector

if TYPE_CHECKING:
    from vashwatch._types import DrainCallback, UpdateKind
    from vashwatch.cache.updater import CacheUpdater
    from vashwatch.config import WatchConfig


SchedulerState: TypeAlias = Literal["idle", "processing", "stopped"]


@dataclass(frozen=True, slots=True)
class UpdateRequest:
    """One normalized "refresh this cache entry" request.

    Attributes:
        kind: ``template`` for an edited template, ``model`` for a page
            refresh caused by a model change.
        module_type: Module type directory (``pg``, ``wg``...).
        module_name: Module directory name.
        content: In-memory template source.  None means re-read from disk.
        file_name: Template file inside the module.

    """

    kind: UpdateKind
    module_type: str
    module_name: str
    content: bytes | None
    file_name: str = DEFAULT_FILE_NAME

    @property
    def module_identity(self) -> tuple[str, str]:
        """The (type, name) pair locating the module."""
        return self.module_type, self.module_name

    @property
    def name(self) -> str:
        """Cache key this request refreshes."""
        return cache_key(self.module_type, self.module_name, self.file_name)


class Trigger(Protocol):
    """Runs a downstream task by name; ``None`` is a no-op."""

    async def run(self, name: str | None) -> None: ...


class UpdateScheduler:
    """Owns the pending queue and the in-flight flag of one watch session.

    Args:
        config: Watch configuration (paths, debug flag, render task).
        updater: Cache updater invoked once per request.
        trigger: Runs the render task after each drain.
        collector: Receives update, failure and trigger events.
        on_drained: Called with the number of processed requests after each
            completed drain.

    """

    def __init__(
        self,
        config: WatchConfig,
        updater: CacheUpdater,
        trigger: Trigger,
        *,
        collector: StackCollector | None = None,
        on_drained: DrainCallback | None = None,
    ) -> None:
        self._config = config
        self._updater = updater
        self._trigger = trigger
        self._collector = collector if collector is not None else StackCollector()
        self._on_drained = on_drained
        self._queue: deque[UpdateRequest] = deque()
        self._in_flight = False
        self._stopped = False
        # Strong references; the loop only keeps weak ones.
        self._drains: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> SchedulerState:
        """Current lifecycle state."""
        if self._stopped:
            return "stopped"
        return "processing" if self._in_flight else "idle"

    @property
    def in_flight(self) -> bool:
        """True while a cache update is outstanding."""
        return self._in_flight

    @property
    def pending(self) -> tuple[UpdateRequest, ...]:
        """Queued requests, oldest first."""
        return tuple(self._queue)

    def submit(self, request: UpdateRequest) -> None:
        """Process ``request`` now, or queue it if an update is in flight.

        Never blocks.  Must be called from the event loop thread.

        """
        if self._stopped:
            self._collector.warn(
                "UpdateScheduler.submit", "Watch was stopped; update dropped.", request.name
            )
            return

        if self._in_flight:
            self._queue.append(request)
            return

        self._start_drain(request)

    def _start_drain(self, request: UpdateRequest) -> None:
        self._in_flight = True
        task = asyncio.get_running_loop().create_task(
            self._drain(request), name=f"vashwatch-drain:{request.name}"
        )
        self._drains.add(task)
        task.add_done_callback(self._drains.discard)

    def stop(self) -> None:
        """End the session.  Safe to call at any point, and more than once."""
        if self._stopped:
            return
        self._stopped = True
        self._queue.clear()

    async def wait_idle(self) -> None:
        """Wait until every started drain (and its render task) has finished."""
        while self._drains:
            await asyncio.gather(*self._drains, return_exceptions=True)

    def params_for(self, request: UpdateRequest) -> CacheUpdateParams:
        """Normalized cache updater parameters for a request."""
        config = self._config
        return CacheUpdateParams(
            type=request.module_type,
            name=request.name,
            template_path=config.template_path(
                request.module_type, request.module_name, request.file_name
            ),
            content=request.content,
            models_path=config.models_path,
            cache_dest=config.cache_path,
            debug_mode=config.debug_mode,
        )

    async def _drain(self, request: UpdateRequest) -> None:
        """Process ``request``, then every queued request, one at a time."""
        processed = 0
        cancelled = False
        try:
            while True:
                await self._process(request)
                processed += 1

                if self._stopped:
                    return
                if not self._queue:
                    break
                request = self._queue.popleft()
        except asyncio.CancelledError:
            cancelled = True
            raise
        finally:
            self._in_flight = False
            # Queued requests keep their place ahead of later submissions.
            if cancelled and self._queue and not self._stopped:
                self._start_drain(self._queue.popleft())

        await self._finish_drain(processed)

    async def _process(self, request: UpdateRequest) -> bool:
        """Run one cache update.  Returns False on failure; never raises."""
        params = self.params_for(request)
        path = str(params.template_path)
        t0 = time.perf_counter()
        try:
            result = await self._updater.update(params)
        except Exception as exc:
            self._collector.record_failure(path, f"{type(exc).__name__}: {exc}")
            return False

        if not result.success:
            self._collector.record_failure(path, result.message)
            return False

        self._collector.record_update(
            params.name,
            path,
            from_disk=request.content is None,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
        return True

    async def _finish_drain(self, processed: int) -> None:
        """Queue is empty: run the render task once for the whole burst.

        The task runs whether or not the updates succeeded; failures were
        already reported one by one.
        """
        task_name = self._config.page_render_task
        if task_name:
            ok = True
            try:
                await self._trigger.run(task_name)
            except Exception as exc:
                ok = False
                self._collector.warn(
                    "UpdateScheduler",
                    f"Task {task_name!r} failed.",
                    f"{type(exc).__name__}: {exc}",
                )
            self._collector.record_trigger(task_name, requests_drained=processed, ok=ok)

        if self._on_drained is not None and not self._stopped:
            try:
                self._on_drained(processed)
            except Exception as exc:
                self._collector.warn(
                    "UpdateScheduler",
                    "Drain callback failed.",
                    f"{type(exc).__name__}: {exc}",
                )
