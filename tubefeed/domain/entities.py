from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar, Union


T = TypeVar("T")

# Opaque continuation token. None means "start from the beginning".
Cursor = str


class QueryKind(Enum):
    """Upstream search filter a tab is bound to."""

    VIDEOS = "videos"
    PLAYLISTS = "playlists"
    CHANNELS = "channels"


class ShelfKind(Enum):
    TRACKS = "tracks"
    PLAYLISTS = "playlists"
    ARTISTS = "artists"


@dataclass(frozen=True)
class Query:
    text: str
    kind: QueryKind = QueryKind.VIDEOS


@dataclass(frozen=True)
class Page(Generic[T]):
    """One batch of results plus the cursor to resume from.

    A page whose next_cursor is None is terminal: callers must stop asking
    the same pager for more.
    """

    items: List[T] = field(default_factory=list)
    next_cursor: Optional[Cursor] = None

    @property
    def is_terminal(self) -> bool:
        return self.next_cursor is None


@dataclass(frozen=True)
class Tab:
    id: str
    label: str


@dataclass(frozen=True)
class Artist:
    """Channel or uploader. id is the upstream channel URL when known."""

    id: Optional[str]
    name: str
    cover: Optional[str] = None


@dataclass(frozen=True)
class Streamable:
    """A single candidate playable source for a track."""

    id: str
    quality: str = ""
    format: str = "audio/*"
    bitrate: Optional[int] = None
    size: Optional[int] = None
    headers: Dict[str, str] = None

    def __post_init__(self):
        if self.headers is None:
            object.__setattr__(self, 'headers', {})


@dataclass(frozen=True)
class Track:
    """Domain entity for a playable item.

    id is the upstream reference later handed back to stream resolution.
    streamables stays empty until the stream resolver fills it in.
    """

    id: str
    title: str = ""
    cover: Optional[str] = None
    duration: Optional[int] = None
    artists: List[Artist] = None
    album: Optional[str] = None
    is_explicit: bool = False
    is_playable: bool = True
    streamables: List[Streamable] = None

    def __post_init__(self):
        if self.artists is None:
            object.__setattr__(self, 'artists', [])
        if self.streamables is None:
            object.__setattr__(self, 'streamables', [])


@dataclass(frozen=True)
class Playlist:
    id: str
    title: str = ""
    cover: Optional[str] = None
    author: Optional[str] = None
    track_count: Optional[int] = None
    is_editable: bool = False


MediaItem = Union[Track, Playlist, Artist]


@dataclass(frozen=True)
class Shelf:
    """Labeled group of media items, all of the type named by kind."""

    kind: ShelfKind
    id: str
    title: str
    items: List[MediaItem] = field(default_factory=list)


@dataclass(frozen=True)
class PlayableMedia:
    """What the host player actually opens for a chosen streamable."""

    url: str
    format: str
    headers: Dict[str, str] = field(default_factory=dict)
    bitrate: Optional[int] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class SettingItem:
    key: str
    title: str
    summary: Optional[str] = None
