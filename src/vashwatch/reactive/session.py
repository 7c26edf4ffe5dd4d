"""Watch session — turns change events into update requests.

Two paths lead into the scheduler:

- Template changed: the module type, module name and file name are derived
  from the template's location, and its new contents are submitted.
- Model changed: no template is affected directly.  The models are combined
  again and every page named on the command line (``--home``, ``--about/Contact``)
  is refreshed from disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from vashwatch.content.pages import get_all_args, split_page_name
from vashwatch.content.paths import get_template_details
from vashwatch.observability.collector import StackCollector
from vashwatch.reactive.scheduler import UpdateRequest

if TYPE_CHECKING:
    from vashwatch._types import ExistsCheck, PageNameSource
    from vashwatch.config import WatchConfig
    from vashwatch.content.watcher import ChangeEvent
    from vashwatch.reactive.scheduler import UpdateScheduler
    from vashwatch.tasks import TaskRunner


def _is_file(path: Path) -> bool:
    return path.is_file()


class WatchSession:
    """Routes change events from the watcher to the update scheduler.

    Args:
        config: Watch configuration.
        scheduler: Scheduler receiving the normalized requests.
        runner: Task runner, used to combine models before a page refresh.
        page_names: Source of page identifiers for the refresh path.
            Defaults to ``--name`` flags in ``sys.argv``.
        exists: File existence check for page templates.
        collector: Receives change events and warnings.

    """

    def __init__(
        self,
        config: WatchConfig,
        scheduler: UpdateScheduler,
        runner: TaskRunner,
        *,
        page_names: PageNameSource | None = None,
        exists: ExistsCheck | None = None,
        collector: StackCollector | None = None,
    ) -> None:
        self._config = config
        self._scheduler = scheduler
        self._runner = runner
        self._page_names: PageNameSource = page_names or get_all_args
        self._exists: ExistsCheck = exists or _is_file
        self._collector = collector if collector is not None else StackCollector()

    @property
    def scheduler(self) -> UpdateScheduler:
        return self._scheduler

    def override_page_names(self, source: PageNameSource) -> None:
        """Swap the page identifier source (e.g. for a test).

        Anything that is not callable is ignored with a warning.

        """
        if not callable(source):
            self._collector.warn(
                "WatchSession.override_page_names",
                "Page name source must be a function; keeping the current one.",
                type(source).__name__,
            )
            return
        self._page_names = source

    def restore_page_names(self) -> None:
        """Go back to reading page identifiers from ``sys.argv``."""
        self._page_names = get_all_args

    async def handle_change(self, event: ChangeEvent) -> None:
        """Process a single file change."""
        self._collector.record_change(
            str(event.path), category=event.category, kind=event.kind
        )

        if event.category == "template":
            if event.kind == "deleted":
                self._collector.warn(
                    "WatchSession",
                    "Template deleted; cache entry left as is.",
                    str(event.path),
                )
                return
            request = self.template_request(event.path, event.content)
            if request is not None:
                self._scheduler.submit(request)
        else:
            await self.refresh_pages()

    def template_request(self, path: Path, content: bytes | None) -> UpdateRequest | None:
        """Normalize a changed template into an update request.

        Returns None (with a warning) when the template is not inside a
        ``<type>/<module>/`` directory of a configured module type.

        """
        try:
            rel = path.relative_to(self._config.root)
        except ValueError:
            rel = path
        details = get_template_details(rel, self._config.dir_types)
        if details is None:
            self._collector.warn(
                "WatchSession",
                f"Template is not inside a module of type {list(self._config.dir_types)}.",
                str(path),
            )
            return None
        return UpdateRequest(
            kind="template",
            module_type=details.type,
            module_name=details.module_name,
            content=content,
            file_name=details.file_name,
        )

    async def refresh_pages(self) -> int:
        """Recombine models and refresh every page named externally.

        Returns:
            Number of update requests submitted.

        """
        page_names = list(self._page_names())
        if not page_names:
            self._collector.warn(
                "WatchSession.refresh_pages",
                'You need to pass page name in a flag like this "--home".',
            )
            return 0

        try:
            await self._runner.run(self._config.combine_models_task)
        except Exception as exc:
            self._collector.warn(
                "WatchSession.refresh_pages",
                "Could not combine models; pages not refreshed.",
                f"{type(exc).__name__}: {exc}",
            )
            return 0

        module_type = self._config.page_dir_type
        submitted = 0
        for page_name in page_names:
            module_name, file_name = split_page_name(page_name)
            template_path = self._config.template_path(module_type, module_name, file_name)
            if not self._exists(template_path):
                self._collector.warn(
                    "WatchSession.refresh_pages",
                    "Seems like that page doesn't have a Vash template.",
                    str(template_path),
                )
                continue

            self._scheduler.submit(
                UpdateRequest(
                    kind="model",
                    module_type=module_type,
                    module_name=module_name,
                    content=None,
                    file_name=file_name,
                )
            )
            submitted += 1
        return submitted
