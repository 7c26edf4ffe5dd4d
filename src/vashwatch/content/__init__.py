"""Content layer — templates and models on disk.

Handles file watching, template path conventions and the page identifiers
used to refresh pages after a model change.
"""

from vashwatch.content.pages import get_all_args, normalize_page_name, split_page_name
from vashwatch.content.paths import TemplateDetails, cache_key, get_template_details
from vashwatch.content.watcher import ChangeEvent, ContentWatcher

__all__ = [
    "ChangeEvent",
    "ContentWatcher",
    "TemplateDetails",
    "cache_key",
    "get_all_args",
    "get_template_details",
    "normalize_page_name",
    "split_page_name",
]
