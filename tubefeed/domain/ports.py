from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol


STREAM = "stream"
PLAYLIST = "playlist"
CHANNEL = "channel"


@dataclass(frozen=True)
class RawItem:
    """Record emitted by a gateway, tagged with the kind of upstream item.

    kind is normally one of STREAM, PLAYLIST or CHANNEL. Gateways may pass
    through other kinds (ads, shelves, mixes); consumers ignore those.
    """

    kind: str
    url: str
    name: str = ""
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None
    uploader_name: Optional[str] = None
    uploader_url: Optional[str] = None
    item_count: Optional[int] = None


@dataclass(frozen=True)
class ItemBatch:
    items: List[RawItem] = field(default_factory=list)
    has_more: bool = False
    next_token: Optional[str] = None


@dataclass(frozen=True)
class StreamVariant:
    """Raw stream format as reported upstream. None means unknown, 0 is a value."""

    url: str
    mime_type: Optional[str] = None
    average_bitrate: Optional[int] = None
    content_length: Optional[int] = None
    format_label: Optional[str] = None


class ExtractionGateway(Protocol):
    """Port for the metadata and stream extraction engine.

    Implementations raise on failure; callers are expected to wrap every call
    with the safe-execution wrapper.
    """

    def search(self, text: str, kinds: Iterable[str], token: Optional[str] = None) -> ItemBatch:
        """Return one batch of results for text, filtered to the given kinds."""

    def resolve_streams(self, item_id: str) -> List[StreamVariant]:
        """Return the stream variants for an item, in upstream order."""


class DefaultContentSource(Protocol):
    """Supplies the items shown when there is no query to search for."""

    def load_default_items(self) -> List[RawItem]:
        """Return raw records for the browse page."""
