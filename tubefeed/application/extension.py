from __future__ import annotations

import logging
from typing import List, Optional

from tubefeed.application.feeds import Feed, FeedRouter
from tubefeed.application.safe import SafeExecutor, default_executor
from tubefeed.application.streams import StreamResolver, to_playable_media
from tubefeed.crosscutting.config import Settings
from tubefeed.domain.entities import PlayableMedia, SettingItem, Streamable, Track
from tubefeed.domain.ports import DefaultContentSource, ExtractionGateway


logger = logging.getLogger(__name__)


class YouTubeAudioExtension:
    """Host-facing entry point: search and home feeds plus track loading.

    Every method returns a usable value; upstream failures show up as empty
    pages or unchanged tracks.
    """

    def __init__(self, gateway: ExtractionGateway,
                 default_content: DefaultContentSource,
                 settings: Optional[Settings] = None,
                 executor: Optional[SafeExecutor] = None):
        self.settings = settings or Settings()
        self.executor = executor or default_executor
        self.router = FeedRouter(gateway, default_content, self.settings, self.executor)
        self.resolver = StreamResolver(gateway, self.executor)
        self._initialized = False

    def initialize(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        logger.info("YouTube audio extension initialized")

    def get_setting_items(self) -> List[SettingItem]:
        return []

    def load_search_feed(self, query: str) -> Feed:
        return self.router.search_feed(query)

    def load_home_feed(self) -> Feed:
        return self.router.home_feed()

    def load_track(self, track: Track, refresh: bool = False) -> Track:
        # Nothing is cached between calls, so refresh has no extra effect.
        return self.resolver.resolve(track)

    def load_streamable_media(self, streamable: Streamable, refresh: bool = False) -> PlayableMedia:
        return to_playable_media(streamable)
