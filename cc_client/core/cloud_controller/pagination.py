"""Lazy traversal of server-paginated listings.

Every Cloud Controller listing answers with one page at a time::

    {"total_results": 137, "total_pages": 3, "prev_url": null,
     "next_url": "/v2/organizations?page=2&results-per-page=50",
     "resources": [...]}

``concat_pages`` turns the first page plus a "fetch the page behind this
continuation" callable into a single iterator. Pages are fetched strictly on
demand: page N+1 is requested only once every item of page N has been handed
out, so a consumer that stops early never pays for the remaining pages.

The continuation (``next_url``) is opaque here and is passed back verbatim.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, List, Mapping, Optional, TypeVar

T = TypeVar("T")

ContinuationToken = str

_EXHAUSTED = object()


@dataclass
class Page(Generic[T]):
    """One server response to a paginated list query.

    ``next_url`` is None if and only if this is the last page.
    """

    resources: List[T] = field(default_factory=list)
    next_url: Optional[ContinuationToken] = None
    total_results: int = 0
    total_pages: Optional[int] = None

    @property
    def is_last(self) -> bool:
        return self.next_url is None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any], item: Callable[[Any], T]) -> "Page[T]":
        """Parse a wire page, converting every resource with ``item``.

        Unknown keys are ignored.
        """
        resources = [item(raw) for raw in payload.get("resources") or []]
        return cls(
            resources=resources,
            next_url=payload.get("next_url") or None,
            total_results=int(payload.get("total_results") or len(resources)),
            total_pages=payload.get("total_pages"),
        )


class LogicalSequence(Iterator[T]):
    """Forward-only, single-pass concatenation of all pages of one query.

    Iterating past the end of the current page triggers exactly one call to
    ``fetch_more`` with the page's continuation token. A failing fetch raises
    from ``__next__`` at the position of the first item of the missing page;
    items already yielded stay with the caller.
    """

    def __init__(self, first_page: Page[T], fetch_more: Callable[[ContinuationToken], Page[T]]):
        self._fetch_more = fetch_more
        self._items: Iterator[T] = iter(first_page.resources)
        self._next_url = first_page.next_url
        self.total_results = first_page.total_results
        self.pages_fetched = 0

    def __iter__(self) -> "LogicalSequence[T]":
        return self

    def __next__(self) -> T:
        while True:
            item = next(self._items, _EXHAUSTED)
            if item is not _EXHAUSTED:
                return item
            if self._next_url is None:
                raise StopIteration
            self._next_page()

    def _next_page(self) -> None:
        """Fetch the page behind the current continuation and make it current."""
        page = self._fetch_more(self._next_url)
        self.pages_fetched += 1
        self._items = iter(page.resources)
        self._next_url = page.next_url


def concat_pages(first_page: Page[T], fetch_more: Callable[[ContinuationToken], Page[T]]) -> LogicalSequence[T]:
    """Concatenate ``first_page`` and all pages reachable from it into one lazy sequence.

    Args:
        first_page: Already fetched first page
        fetch_more: Returns the page behind a continuation token (or raises)

    Returns:
        Lazy iterator over every item, in page order then in-page order
    """
    return LogicalSequence(first_page, fetch_more)
