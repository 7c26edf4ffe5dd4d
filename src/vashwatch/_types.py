"""Shared type definitions for vashwatch."""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Literal, TypeAlias

if TYPE_CHECKING:
    from pathlib import Path

# Discriminant of a change event / update request
UpdateKind: TypeAlias = Literal["template", "model"]

# Supplies externally given page identifiers (e.g. "about/Index")
PageNameSource: TypeAlias = Callable[[], Sequence[str]]

# File existence check used by the page refresh path
ExistsCheck: TypeAlias = "Callable[[Path], bool]"

# Called once a drain cycle has finished, with the number of requests processed
DrainCallback: TypeAlias = Callable[[int], None]
