"""Adapters from Azure SDK paged operations to the page-by-page lister."""

from __future__ import annotations

import logging
from typing import Any, Callable

from azext_templatespecs.completion.enumerator import NamedItem, Page

logger = logging.getLogger(__name__)


class PagedLister:
    """Expose an ``ItemPaged``-returning operation one page at a time.

    ``list_operation`` is called once per fetch.  Each fetch asks the
    pager for a single page starting at the given continuation token
    and reports the pager's token for the page after it.
    """

    def __init__(self, list_operation: Callable[[], Any], description: str = ""):
        self._list_operation = list_operation
        self.description = description or getattr(list_operation, "__name__", "listing")

    def fetch_first_page(self) -> Page:
        return self._fetch(None)

    def fetch_next_page(self, continuation_token: str) -> Page:
        return self._fetch(continuation_token)

    def _fetch(self, continuation_token: str | None) -> Page:
        logger.debug("Fetching %s page (token=%s)", self.description, bool(continuation_token))
        pages = self._list_operation().by_page(continuation_token=continuation_token)
        try:
            page = next(pages)
        except StopIteration:
            return Page()

        items = [NamedItem(name=item.name) for item in page if getattr(item, "name", None)]
        return Page(items=items, continuation_token=pages.continuation_token or None)


def built_in_template_spec_lister(client) -> PagedLister:
    """Lister over the tenant's built-in template specs."""
    return PagedLister(client.template_specs.list_built_ins, "built-in template specs")


def built_in_version_lister(client, template_spec_name: str) -> PagedLister:
    """Lister over the versions of one built-in template spec."""
    return PagedLister(
        lambda: client.template_spec_versions.list_built_ins(template_spec_name),
        f"built-in versions of '{template_spec_name}'",
    )
