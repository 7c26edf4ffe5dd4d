"""Page identifiers supplied on the command line.

When a model file changes there is no template to recompile, so the pages to
refresh are named externally, as ``--flag`` arguments::

    --home                 -> "home"                (pg/home/.../Index.vash)
    --about/Contact        -> "about/Contact"       (pg/about/.../Contact.vash)
    --SG_Buttons           -> "styleGuide/SG_Buttons"

"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from vashwatch.content.paths import DEFAULT_FILE_NAME, TEMPLATE_SUFFIX

# Shortcut prefix for style guide pages.
STYLE_GUIDE_PREFIX = "SG_"
STYLE_GUIDE_MODULE = "styleGuide"


def normalize_page_name(page_name: str) -> str:
    """Expand the style guide shortcut: ``SG_Buttons`` -> ``styleGuide/SG_Buttons``."""
    if page_name.startswith(STYLE_GUIDE_PREFIX):
        return f"{STYLE_GUIDE_MODULE}/{page_name}"
    return page_name


def get_all_args(args: Sequence[str] | None = None) -> list[str]:
    """Return every ``--name`` argument value, without the ``--`` prefix.

    Args:
        args: Arguments to scan. Defaults to ``sys.argv``.

    """
    if args is None:
        args = sys.argv

    values: list[str] = []
    for arg in args:
        if not arg.startswith("--"):
            continue
        value = arg.split(" ")[0][2:]
        if not value:
            continue
        values.append(normalize_page_name(value))
    return values


def split_page_name(page_name: str) -> tuple[str, str]:
    """Split ``module/File`` into the module name and the template file name.

    A bare module name selects its ``Index.vash``.

    """
    if "/" not in page_name:
        return page_name, DEFAULT_FILE_NAME
    module_name, file_stem = page_name.split("/")[:2]
    return module_name, file_stem + TEMPLATE_SUFFIX
