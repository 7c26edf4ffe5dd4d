"""Template path conventions.

Derives the module type, module name and file name of a template from its
location on disk. A template module lives in a directory named after its
module type::

    pg/about/Index.vash         -> ("pg", "about", "Index.vash")
    pg/home/tmpl/Index.vash     -> ("pg", "home", "Index.vash")
    wg/SiteFooter/Footer.vash   -> ("wg", "SiteFooter", "Footer.vash")

"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

DEFAULT_FILE_NAME = "Index.vash"
TEMPLATE_SUFFIX = ".vash"


@dataclass(frozen=True, slots=True)
class TemplateDetails:
    """Where a template sits in the module hierarchy."""

    type: str
    module_name: str
    file_name: str


def is_template(path: PurePath) -> bool:
    """Whether the path is a Vash template (as opposed to a model file)."""
    return path.suffix == TEMPLATE_SUFFIX


def _type_index(parts: tuple[str, ...], dir_types: tuple[str, ...]) -> int | None:
    # Nearest enclosing module-type directory wins; the file name never counts.
    for i in range(len(parts) - 2, -1, -1):
        if parts[i] in dir_types:
            return i
    return None


def get_dir_type_from_path(path: PurePath, dir_types: tuple[str, ...]) -> str | None:
    """Return the module type directory the path sits in, or None."""
    idx = _type_index(path.parts, dir_types)
    return None if idx is None else path.parts[idx]


def get_module_name(path: PurePath, module_type: str) -> str | None:
    """Return the directory directly below the module type directory."""
    parts = path.parts
    idx = _type_index(parts, (module_type,))
    if idx is None or idx + 1 >= len(parts) - 1:
        return None
    return parts[idx + 1]


def get_file_name(path: PurePath, *, with_ext: bool = True) -> str:
    """Return the template's file name, optionally without its extension."""
    return path.name if with_ext else path.stem


def get_template_details(
    path: PurePath, dir_types: tuple[str, ...]
) -> TemplateDetails | None:
    """Resolve type, module name and file name of a template.

    Returns None when the path is not inside a ``<type>/<module>/`` directory.

    """
    module_type = get_dir_type_from_path(path, dir_types)
    if module_type is None:
        return None
    module_name = get_module_name(path, module_type)
    if module_name is None:
        return None
    return TemplateDetails(
        type=module_type,
        module_name=module_name,
        file_name=get_file_name(path),
    )


def cache_key(module_type: str, module_name: str, file_name: str) -> str:
    """Name of a template inside the cache, e.g. ``pg_about/Index``."""
    return f"{module_type}_{module_name}/{PurePath(file_name).stem}"
