"""vashwatch application — wires watcher, session, scheduler and tasks.

``watch()`` is the primary entry point: it validates the configuration, runs
the initial task sequence, starts the file watcher and returns a live
``WatchHandle``.  ``run()`` and ``precompile()`` are the blocking
conveniences used by the CLI.
"""

from __future__ import annotations

import asyncio
import importlib.util
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from vashwatch._errors import ConfigError
from vashwatch.cache.updater import JsonTemplateCache
from vashwatch.config_loader import load_config
from vashwatch.content.watcher import ContentWatcher
from vashwatch.observability.collector import StackCollector
from vashwatch.reactive.scheduler import UpdateScheduler
from vashwatch.reactive.session import WatchSession
from vashwatch.tasks import TaskRunner

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from vashwatch._types import DrainCallback, ExistsCheck, PageNameSource
    from vashwatch.cache.updater import CacheUpdater
    from vashwatch.config import WatchConfig
    from vashwatch.content.watcher import ChangeEvent


class EventSource(Protocol):
    """What ``watch()`` needs from a change event source."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def changes(self) -> AsyncIterator[ChangeEvent]: ...


class WatchHandle:
    """A running watch.  Stop it with ``stop()``."""

    def __init__(
        self,
        session: WatchSession,
        source: EventSource,
        consumer: asyncio.Task[None],
        collector: StackCollector,
    ) -> None:
        self._session = session
        self._source = source
        self._consumer = consumer
        self._collector = collector
        self._stopped = False

    @property
    def session(self) -> WatchSession:
        return self._session

    @property
    def scheduler(self) -> UpdateScheduler:
        return self._session.scheduler

    @property
    def collector(self) -> StackCollector:
        return self._collector

    @property
    def is_running(self) -> bool:
        """Whether the handle still consumes change events."""
        return not self._stopped and not self._consumer.done()

    def stop(self) -> None:
        """Stop watching.  An in-flight cache update is left to finish."""
        if self._stopped:
            return
        self._stopped = True
        self.scheduler.stop()
        self._consumer.cancel()
        self._source.stop()

    async def wait_idle(self) -> None:
        """Wait until queued cache updates and the render task have finished."""
        await self.scheduler.wait_idle()


def _check_tasks(config: WatchConfig, runner: TaskRunner) -> None:
    """Every configured task name must be registered before watching."""
    names = (config.combine_models_task, config.precompile_task, config.page_render_task)
    missing = [n for n in names if n and n not in runner]
    if missing:
        msg = f"Task(s) not registered with the runner: {', '.join(missing)}"
        raise ConfigError(msg)


async def watch(
    config: WatchConfig,
    *,
    runner: TaskRunner,
    updater: CacheUpdater | None = None,
    page_names: PageNameSource | None = None,
    exists: ExistsCheck | None = None,
    collector: StackCollector | None = None,
    on_drained: DrainCallback | None = None,
    source: EventSource | None = None,
) -> WatchHandle:
    """Watch models and templates, keeping the template cache up to date.

    Every configured task runs once first (combine models, precompile,
    render).  Then each template change updates its cache entry, and each
    model change recombines the models and refreshes the pages named by
    ``page_names``.  Cache updates never overlap; the render task runs once
    whenever the update queue drains.

    Args:
        config: Watch configuration.  Validated here.
        runner: Task runner holding the configured tasks.
        updater: Cache updater.  Defaults to a ``JsonTemplateCache``.
        page_names: Page identifier source for model changes.
        exists: File existence check for page templates.
        collector: Event collector.  A fresh one is created if omitted.
        on_drained: Called after each drain with the number of updates.
        source: Change event source.  Defaults to a ``ContentWatcher``.

    Raises:
        ConfigError: If a mandatory option is missing or a task is unknown.

    """
    config.validate()
    _check_tasks(config, runner)
    collector = collector if collector is not None else StackCollector()

    await runner.run_sequence(*config.initial_tasks)

    scheduler = UpdateScheduler(
        config,
        updater if updater is not None else JsonTemplateCache(),
        runner,
        collector=collector,
        on_drained=on_drained,
    )
    session = WatchSession(
        config,
        scheduler,
        runner,
        page_names=page_names,
        exists=exists,
        collector=collector,
    )

    source = source if source is not None else ContentWatcher(config)
    source.start()

    async def _consume_events() -> None:
        async for event in source.changes():
            try:
                await session.handle_change(event)
            except Exception as exc:
                collector.warn("watch", "Pipeline error.", f"{event.path.name}: {exc}")

    consumer = asyncio.create_task(_consume_events(), name="vashwatch-consumer")
    return WatchHandle(session, source, consumer, collector)


def _resolve_task_runner(config: WatchConfig) -> TaskRunner:
    """Resolve the TaskRunner named by ``config.task_runner``.

    Format: ``module:attr`` (e.g. ``build_tasks:runner`` for build_tasks.py
    under the root).  Without one, an empty runner is returned.
    """
    spec = config.task_runner
    if not spec:
        return TaskRunner()
    module_part, _, attr = spec.partition(":")
    if not module_part or not attr:
        msg = f"task_runner {spec!r}: expected 'module:attr'"
        raise ConfigError(msg)
    py_file = config.root / f"{module_part}.py"
    if not py_file.is_file():
        msg = f"task_runner {spec!r}: {py_file} not found"
        raise ConfigError(msg)
    module_name = f"vashwatch_tasks_{module_part}"
    spec_obj = importlib.util.spec_from_file_location(module_name, py_file)
    if spec_obj is None or spec_obj.loader is None:
        msg = f"task_runner {spec!r}: failed to load {py_file}"
        raise ConfigError(msg)
    module = importlib.util.module_from_spec(spec_obj)
    sys.modules[module_name] = module
    spec_obj.loader.exec_module(module)
    runner = getattr(module, attr, None)
    if not isinstance(runner, TaskRunner):
        msg = f"task_runner {spec!r}: {attr} is not a TaskRunner in {py_file}"
        raise ConfigError(msg)
    return runner


# ---------------------------------------------------------------------------
# Blocking entry points
# ---------------------------------------------------------------------------


def run(
    root: str | Path = ".",
    *,
    page_names: PageNameSource | None = None,
    **kwargs: object,
) -> None:
    """Watch until interrupted (Ctrl+C).

    Args:
        root: Project root containing ``vashwatch.yaml``.
        page_names: Page identifier source for model changes.
        **kwargs: Override WatchConfig fields.

    """
    from vashwatch.banner import print_banner

    t0 = time.perf_counter()
    config = load_config(Path(root), **kwargs)
    runner = _resolve_task_runner(config)

    async def _main() -> None:
        handle = await watch(config, runner=runner, page_names=page_names)
        print_banner(config, load_ms=(time.perf_counter() - t0) * 1000)
        try:
            await asyncio.Event().wait()
        finally:
            handle.stop()
            await handle.wait_idle()

    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        print("\n  Stopped watching.", file=sys.stderr)


def precompile(root: str | Path = ".", **kwargs: object) -> int:
    """Build the whole template cache once.

    Returns:
        Number of templates written.

    """
    config = load_config(Path(root), **kwargs)
    if not config.vash_src or not config.cache_dest:
        msg = "precompile needs vash_src and cache_dest"
        raise ConfigError(msg)
    return JsonTemplateCache().precompile(config)
