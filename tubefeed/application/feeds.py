from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

from tubefeed.application.paging import (
    CursorPager, PageSource, search_page_source, single_page_source
)
from tubefeed.application.safe import SafeExecutor, default_executor
from tubefeed.crosscutting.config import Settings
from tubefeed.domain.entities import Query, QueryKind, Tab
from tubefeed.domain.ports import DefaultContentSource, ExtractionGateway


logger = logging.getLogger(__name__)

SEARCH_TABS = [
    (Tab(id="Videos", label="Videos"), QueryKind.VIDEOS),
    (Tab(id="Playlists", label="Playlists"), QueryKind.PLAYLISTS),
    (Tab(id="Channels", label="Channels"), QueryKind.CHANNELS),
]

HOME_TABS = ["Trending", "Music", "Recommended"]


@dataclass(frozen=True)
class TabRoute:
    """Binds a tab to the upstream query it paginates over."""

    tab: Tab
    kind: QueryKind
    query_text: str


class Feed:
    """Ordered set of tabs, each resolvable to a fresh pager.

    Routes are fixed at construction and the feed keeps no other state, so
    resolving the same tab twice gives two independent cursor lineages.
    """

    def __init__(self, routes: Sequence[TabRoute],
                 pager_factory: Callable[[TabRoute], CursorPager],
                 browse_factory: Callable[[], CursorPager]):
        seen = set()
        for route in routes:
            if route.tab.id in seen:
                raise ValueError(f"Duplicate tab id: {route.tab.id}")
            seen.add(route.tab.id)
        self._routes: Dict[str, TabRoute] = {r.tab.id: r for r in routes}
        self._ordered = list(routes)
        self._pager_factory = pager_factory
        self._browse_factory = browse_factory

    @property
    def tabs(self) -> List[Tab]:
        return [r.tab for r in self._ordered]

    def route_for(self, tab: Union[Tab, str, None]) -> Optional[TabRoute]:
        """Route a tab resolves to, or None for the browse pager."""
        if tab is None:
            return None
        tab_id = tab.id if isinstance(tab, Tab) else tab
        route = self._routes.get(tab_id)
        if route is not None:
            return route
        if not self._ordered:
            return None
        logger.warning(f"Unknown tab '{tab_id}', falling back to '{self._ordered[0].tab.id}'")
        return self._ordered[0]

    def resolve(self, tab: Union[Tab, str, None] = None) -> CursorPager:
        route = self.route_for(tab)
        if route is None:
            return self._browse_factory()
        return self._pager_factory(route)


class FeedRouter:
    """Builds search and home feeds on top of one gateway."""

    def __init__(self, gateway: ExtractionGateway,
                 default_content: DefaultContentSource,
                 settings: Optional[Settings] = None,
                 executor: Optional[SafeExecutor] = None):
        self.gateway = gateway
        self.default_content = default_content
        self.settings = settings or Settings()
        self.executor = executor or default_executor

    def _search_pager(self, label: str, route: TabRoute) -> CursorPager:
        source = search_page_source(
            self.gateway, Query(route.query_text, route.kind), title_prefix=route.tab.label
        )
        return CursorPager(source, label=label, executor=self.executor, tab=route.tab.id)

    def _browse_pager(self, label: str) -> CursorPager:
        source: PageSource = single_page_source(self.default_content.load_default_items)
        return CursorPager(source, label=label, executor=self.executor)

    def search_feed(self, query_text: str) -> Feed:
        """Feed with Videos/Playlists/Channels tabs for query_text.

        A blank query has no tabs; every resolve lands on the browse pager.
        """
        text = (query_text or "").strip()
        routes = [] if not text else [TabRoute(tab, kind, text) for tab, kind in SEARCH_TABS]
        return Feed(
            routes,
            lambda route: self._search_pager("loadSearchFeed", route),
            lambda: self._browse_pager("loadSearchFeed"),
        )

    def home_feed(self) -> Feed:
        queries = self.settings.home_queries
        routes = [
            TabRoute(Tab(id=name, label=name), QueryKind.VIDEOS, queries[name])
            for name in HOME_TABS if queries.get(name)
        ]
        return Feed(
            routes,
            lambda route: self._search_pager("loadHomeFeed", route),
            lambda: self._browse_pager("loadHomeFeed"),
        )
