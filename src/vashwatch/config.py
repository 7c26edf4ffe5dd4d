"""vashwatch configuration.

WatchConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from vashwatch._errors import ConfigError

# Options that must be non-empty before a watch can start.
_REQUIRED: tuple[str, ...] = (
    "vash_src",
    "model_src",
    "models_dest",
    "cache_dest",
    "dir_types",
    "page_template_path",
)


def _as_tuple(value: object) -> tuple[str, ...]:
    """Normalize a glob or list of globs (as read from YAML/TOML) to a tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)  # type: ignore[union-attr]


@dataclass(frozen=True, slots=True)
class WatchConfig:
    """Configuration for watching models and templates.

    Attributes:
        root: Project root. Globs and destination paths are relative to it.
              Always resolved to an absolute path on construction.
        vash_src: Globs of Vash templates to watch.
        model_src: Globs of model files to watch.
        models_dest: Path of the combined models JS file.
        cache_dest: Path of the JSON template cache.
        debug_mode: Compile templates with debugging info (False for production).
        dir_types: Module types (e.g. ``pg``, ``wg``, ``glb``), matching the
            parent directory name of template modules.
        page_template_path: ``str.format`` pattern locating a page template when
            only the page name is known, e.g.
            ``"{type}/{module_name}/tmpl/{file_name}"``.
        page_dir_type: Module type used for page templates.
        combine_models_task: Task name that combines the models.
        precompile_task: Task name that precompiles every template.
        page_render_task: Task name that renders pages from the cache.
        debounce_ms: Watcher debounce window in milliseconds.
        task_runner: ``module:attr`` naming a TaskRunner defined in a Python
            file under root (e.g. ``build_tasks:runner``). Used by ``run()``
            and the CLI.

    """

    root: Path = field(default_factory=Path.cwd)
    vash_src: tuple[str, ...] = ()
    model_src: tuple[str, ...] = ()
    models_dest: str = ""
    cache_dest: str = ""
    debug_mode: bool = False
    dir_types: tuple[str, ...] = ("pg",)
    page_template_path: str = ""
    page_dir_type: str = "pg"
    combine_models_task: str | None = None
    precompile_task: str | None = None
    page_render_task: str | None = None
    debounce_ms: int = 300
    task_runner: str | None = None

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; globs are matched relative to root.
        root = Path(self.root)
        if not root.is_absolute():
            root = root.resolve()
        object.__setattr__(self, "root", root)
        for name in ("vash_src", "model_src", "dir_types"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

    @property
    def models_path(self) -> Path:
        """Absolute path to the combined models file."""
        return self.root / self.models_dest

    @property
    def cache_path(self) -> Path:
        """Absolute path to the template cache file."""
        return self.root / self.cache_dest

    @property
    def watch_globs(self) -> tuple[str, ...]:
        """Every glob being watched, templates first."""
        return self.vash_src + self.model_src

    @property
    def initial_tasks(self) -> tuple[str, ...]:
        """Tasks run once before watching starts, in order."""
        names = (self.combine_models_task, self.precompile_task, self.page_render_task)
        return tuple(n for n in names if n)

    def template_path(
        self, module_type: str, module_name: str, file_name: str | None = None
    ) -> Path:
        """Absolute path of a module's template, built from ``page_template_path``."""
        rel = self.page_template_path.format(
            type=module_type,
            module_name=module_name,
            file_name=file_name or "Index.vash",
        )
        return self.root / rel

    def validate(self) -> None:
        """Raise ConfigError if a mandatory option is missing or malformed."""
        missing = [name for name in _REQUIRED if not getattr(self, name)]
        if missing:
            msg = f"Missing mandatory option(s): {', '.join(missing)}"
            raise ConfigError(msg)

        try:
            self.template_path(self.page_dir_type, "module")
        except (KeyError, IndexError, ValueError) as exc:
            msg = f"Invalid page_template_path {self.page_template_path!r}: {exc}"
            raise ConfigError(msg) from exc

        if self.page_dir_type not in self.dir_types:
            msg = (
                f"page_dir_type {self.page_dir_type!r} is not one of "
                f"dir_types {list(self.dir_types)}"
            )
            raise ConfigError(msg)
