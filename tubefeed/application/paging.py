from __future__ import annotations

import logging
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

from tubefeed.application.mapping import project
from tubefeed.application.safe import SafeExecutor, default_executor
from tubefeed.crosscutting.logging import CorrelationContext, log_page_loaded
from tubefeed.domain.entities import Cursor, Page, Query, Shelf
from tubefeed.domain.ports import ExtractionGateway, RawItem


T = TypeVar("T")

# Pure "fetch the page at this cursor" function. Must not keep cursor state.
PageSource = Callable[[Optional[Cursor]], Page]

logger = logging.getLogger(__name__)


class CursorPager(Generic[T]):
    """Stateful adapter over a PageSource, owned by a single caller.

    load() with an explicit cursor always goes to that cursor; load_next()
    resumes from the cursor of the last page returned. Not safe for
    concurrent use: callers serialize access to one instance.
    """

    def __init__(self, source: PageSource, label: str = "pager",
                 executor: Optional[SafeExecutor] = None, tab: Optional[str] = None):
        self._source = source
        self.label = label
        self.tab = tab
        self._executor = executor or default_executor
        self._last_cursor: Optional[Cursor] = None
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def last_cursor(self) -> Optional[Cursor]:
        return self._last_cursor

    def load(self, cursor: Optional[Cursor] = None) -> Page[T]:
        with CorrelationContext(operation=self.label, tab=self.tab):
            page = self._executor.run(
                self.label,
                lambda: _checked(self._source(cursor)),
                Page([], None),
            )
        self._last_cursor = page.next_cursor
        self._exhausted = page.next_cursor is None
        return page

    def load_next(self) -> Page[T]:
        if self._exhausted:
            return Page([], None)
        return self.load(self._last_cursor)


def _checked(page: Page) -> Page:
    if page is None or page.items is None:
        raise TypeError("page source returned no items")
    return page


def iter_pages(pager: CursorPager, max_pages: Optional[int] = None) -> Iterator[Page]:
    """Yield pages from the start, following next_cursor until a terminal page."""
    cursor = None
    count = 0
    while max_pages is None or count < max_pages:
        page = pager.load(cursor)
        count += 1
        yield page
        if page.next_cursor is None:
            return
        cursor = page.next_cursor


def search_page_source(gateway: ExtractionGateway, query: Query,
                       title_prefix: str = "") -> PageSource:
    """PageSource backed by a live gateway search bound to query."""

    def fetch(cursor: Optional[Cursor]) -> Page[Shelf]:
        batch = gateway.search(query.text, {query.kind.value}, token=cursor)
        shelves = project(batch.items, title_prefix=title_prefix)
        next_cursor = batch.next_token if batch.has_more else None
        log_page_loaded(logger, title_prefix or query.kind.value, len(batch.items),
                        next_cursor is not None, query=query.text)
        return Page(shelves, next_cursor)

    return fetch


def single_page_source(loader: Callable[[], List[RawItem]],
                       title_prefix: str = "") -> PageSource:
    """PageSource that serves one fixed page and nothing after it."""

    def fetch(cursor: Optional[Cursor]) -> Page[Shelf]:
        if cursor is not None:
            return Page([], None)
        return Page(project(loader(), title_prefix=title_prefix), None)

    return fetch
