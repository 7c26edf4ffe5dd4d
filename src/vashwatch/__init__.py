"""vashwatch — keeps a Vash template cache in sync while you edit.

Watches template (``*.vash``) and model files.  A changed template refreshes
its entry in the JSON template cache; a changed model recombines the models
and refreshes the pages named on the command line.  Cache updates never
overlap, and the render task runs once per burst of changes.

Quick start::

    import asyncio
    import vashwatch

    runner = vashwatch.TaskRunner()
    runner.register("render", render_pages)

    config = vashwatch.WatchConfig(
        vash_src=("templates/**/*.vash",),
        model_src=("models/**/*.js",),
        models_dest="dist/models.js",
        cache_dest="dist/precompiled-vash.json",
        dir_types=("pg", "wg", "glb"),
        page_template_path="templates/{type}/{module_name}/tmpl/{file_name}",
        page_render_task="render",
    )

    async def main():
        handle = await vashwatch.watch(config, runner=runner)
        ...
        handle.stop()

Blocking form, reading ``vashwatch.yaml``::

    vashwatch.run("my-project/")

"""

__version__ = "0.1.0"
__all__ = [
    "TaskRunner",
    "WatchConfig",
    "__version__",
    "precompile",
    "run",
    "suppress_warnings",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import vashwatch`` fast; watchfiles is only loaded when needed.
    """
    if name == "WatchConfig":
        from vashwatch.config import WatchConfig

        return WatchConfig

    if name == "TaskRunner":
        from vashwatch.tasks import TaskRunner

        return TaskRunner

    if name == "suppress_warnings":
        from vashwatch.observability.console import suppress_warnings

        return suppress_warnings

    if name in ("watch", "run", "precompile"):
        from vashwatch import app

        return getattr(app, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
