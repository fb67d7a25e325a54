from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Tuple

from tubefeed.domain.entities import Artist, MediaItem, Playlist, Shelf, ShelfKind, Track
from tubefeed.domain.ports import CHANNEL, PLAYLIST, STREAM, RawItem


def to_track(item: RawItem) -> Track:
    artists = []
    if item.uploader_name:
        artists.append(Artist(id=item.uploader_url, name=item.uploader_name))
    return Track(
        id=item.url,
        title=item.name,
        cover=item.thumbnail_url,
        duration=item.duration,
        artists=artists,
        album=None,
        is_explicit=False,
        is_playable=True,
    )


def to_playlist(item: RawItem) -> Playlist:
    return Playlist(
        id=item.url,
        title=item.name,
        cover=item.thumbnail_url,
        author=item.uploader_name,
        track_count=item.item_count,
        is_editable=False,
    )


def to_artist(item: RawItem) -> Artist:
    return Artist(id=item.url, name=item.name, cover=item.thumbnail_url)


# Closed dispatch table keyed on the gateway's kind tag. Kinds missing here
# (ads, mixes, shorts shelves) are dropped without comment.
_MAPPERS: Dict[str, Tuple[ShelfKind, str, Callable[[RawItem], MediaItem]]] = {
    STREAM: (ShelfKind.TRACKS, "Tracks", to_track),
    PLAYLIST: (ShelfKind.PLAYLISTS, "Playlists", to_playlist),
    CHANNEL: (ShelfKind.ARTISTS, "Artists", to_artist),
}


def project(raw_items: Sequence[RawItem], title_prefix: str = "") -> List[Shelf]:
    """Group raw records into one shelf per recognized kind.

    Shelves come out in the order their kind first appears; items keep their
    upstream relative order. Inputs are not modified.
    """
    grouped: Dict[ShelfKind, List[MediaItem]] = {}
    titles: Dict[ShelfKind, str] = {}
    for item in raw_items:
        entry = _MAPPERS.get(item.kind)
        if entry is None:
            continue
        shelf_kind, title, mapper = entry
        grouped.setdefault(shelf_kind, []).append(mapper(item))
        titles[shelf_kind] = title

    shelves = []
    for shelf_kind, items in grouped.items():
        title = titles[shelf_kind]
        shelf_id = shelf_kind.value
        if title_prefix:
            title = f"{title_prefix} - {title}"
            shelf_id = f"{title_prefix.lower()}:{shelf_id}"
        shelves.append(Shelf(kind=shelf_kind, id=shelf_id, title=title, items=items))
    return shelves
