"""Task runner — the downstream tasks triggered after cache updates.

Tasks are plain callables registered by name: combining models, precompiling
every template, rendering pages.  Sync callables run in a worker thread so
they never block the event loop; coroutine functions are awaited directly.

Usage::

    runner = TaskRunner()

    @runner.task("render")
    def render() -> None:
        ...

    await runner.run_sequence("combine-models", "precompile", "render")

"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from vashwatch._errors import TaskError

TaskFunc: TypeAlias = Callable[[], Any] | Callable[[], Awaitable[Any]]


class TaskRunner:
    """Named task registry with sequential execution."""

    def __init__(self) -> None:
        self._tasks: dict[str, TaskFunc] = {}

    def register(self, name: str, fn: TaskFunc) -> None:
        """Register ``fn`` under ``name``, replacing any earlier task."""
        self._tasks[name] = fn

    def task(self, name: str) -> Callable[[TaskFunc], TaskFunc]:
        """Decorator form of ``register``."""

        def decorator(fn: TaskFunc) -> TaskFunc:
            self.register(name, fn)
            return fn

        return decorator

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    @property
    def names(self) -> frozenset[str]:
        """Registered task names."""
        return frozenset(self._tasks)

    async def run(self, name: str | None) -> None:
        """Run one task. ``None`` is a no-op.

        Raises:
            TaskError: If no task is registered under ``name``.

        """
        if name is None:
            return
        fn = self._tasks.get(name)
        if fn is None:
            msg = f"Unknown task {name!r}"
            raise TaskError(msg)

        if inspect.iscoroutinefunction(fn):
            await fn()
            return
        result = await asyncio.to_thread(fn)
        if inspect.isawaitable(result):
            await result

    async def run_sequence(self, *names: str | None) -> None:
        """Run tasks one after another, skipping ``None`` entries."""
        for name in names:
            await self.run(name)
