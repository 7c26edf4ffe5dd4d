"""Shared test fixtures for vashwatch."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from vashwatch.cache.updater import CacheUpdateParams, CacheUpdateResult
from vashwatch.config import WatchConfig
from vashwatch.observability import console
from vashwatch.observability.collector import StackCollector
from vashwatch.observability.log import EventLog


@pytest.fixture(autouse=True)
def _quiet_warnings() -> None:
    """Keep warning lines out of test output; they are still recorded."""
    console.suppress_warnings(True)
    yield
    console.suppress_warnings(False)


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal project with page, widget and model sources.

    Layout::

        templates/pg/about/Index.vash
        templates/pg/about/Contact.vash
        templates/pg/home/Index.vash
        templates/wg/SiteFooter/Index.vash
        models/about.js
    """
    templates = tmp_path / "templates"
    for rel, body in {
        "pg/about/Index.vash": "<h1>About</h1>\n",
        "pg/about/Contact.vash": "<h1>Contact</h1>\n",
        "pg/home/Index.vash": "<h1>@model.title</h1>\n",
        "wg/SiteFooter/Index.vash": "<footer></footer>\n",
    }.items():
        path = templates / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body)

    models = tmp_path / "models"
    models.mkdir()
    (models / "about.js").write_text("var about = { title: 'About' };\n")
    return tmp_path


@pytest.fixture
def config(tmp_project: Path) -> WatchConfig:
    """A complete WatchConfig rooted at ``tmp_project``."""
    return make_config(tmp_project)


@pytest.fixture
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture
def collector(event_log: EventLog) -> StackCollector:
    return StackCollector(event_log)


def make_config(root: Path, **overrides: object) -> WatchConfig:
    """Build a valid WatchConfig for ``root`` with optional overrides."""
    options: dict[str, object] = {
        "vash_src": ("templates/**/*.vash",),
        "model_src": ("models/**/*.js",),
        "models_dest": "dist/models.js",
        "cache_dest": "dist/precompiled-vash.json",
        "dir_types": ("pg", "wg", "glb"),
        "page_template_path": "templates/{type}/{module_name}/{file_name}",
        "page_render_task": "render",
    }
    options.update(overrides)
    return WatchConfig(root=root, **options)  # type: ignore[arg-type]


async def settle(ticks: int = 10) -> None:
    """Let pending tasks on the event loop run for a few iterations."""
    for _ in range(ticks):
        await asyncio.sleep(0)


class FakeUpdater:
    """Cache updater that records calls and tracks overlap.

    With ``gated=True`` every call waits until ``release()`` is called;
    otherwise calls complete after yielding to the event loop once.
    """

    def __init__(
        self, *, gated: bool = False, timeline: list[tuple[str, str]] | None = None
    ) -> None:
        self.calls: list[CacheUpdateParams] = []
        self.active = 0
        self.max_active = 0
        self.fail_names: set[str] = set()
        self.raise_names: set[str] = set()
        self.timeline = timeline if timeline is not None else []
        self._gated = gated
        self._gates: list[asyncio.Event] = []

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.calls]

    async def update(self, params: CacheUpdateParams) -> CacheUpdateResult:
        self.calls.append(params)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self._gated:
                gate = asyncio.Event()
                self._gates.append(gate)
                await gate.wait()
            else:
                await asyncio.sleep(0)
        finally:
            self.active -= 1

        self.timeline.append(("update", params.name))
        if params.name in self.raise_names:
            msg = f"cannot compile {params.name}"
            raise RuntimeError(msg)
        if params.name in self.fail_names:
            return CacheUpdateResult(False, params.name, "syntax error on line 1")
        return CacheUpdateResult(True, params.name)

    def release(self) -> None:
        """Let the oldest waiting call complete."""
        for gate in self._gates:
            if not gate.is_set():
                gate.set()
                return


class RecordingTrigger:
    """Downstream trigger that records task names."""

    def __init__(self, timeline: list[tuple[str, str]] | None = None) -> None:
        self.runs: list[str | None] = []
        self.timeline = timeline if timeline is not None else []
        self.error: Exception | None = None

    async def run(self, name: str | None) -> None:
        self.runs.append(name)
        self.timeline.append(("trigger", str(name)))
        if self.error is not None:
            raise self.error
