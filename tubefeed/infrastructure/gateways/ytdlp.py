import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

import yt_dlp
from yt_dlp.utils import DownloadError, ExtractorError

from tubefeed.domain.errors import ExtractionError, NotFound, TemporaryFailure
from tubefeed.domain.ports import (
    CHANNEL, PLAYLIST, STREAM, ItemBatch, RawItem, StreamVariant
)

logger = logging.getLogger(__name__)

SEARCH_URL = 'https://www.youtube.com/results'
WATCH_URL = 'https://www.youtube.com/watch?v='

# Result-type filters understood by the YouTube results page.
_SEARCH_FILTERS = {
    'videos': 'EgIQAQ==',
    'channels': 'EgIQAg==',
    'playlists': 'EgIQAw==',
}

_MIME_BY_EXT = {
    'm4a': 'audio/mp4',
    'mp4': 'audio/mp4',
    'webm': 'audio/webm',
    'opus': 'audio/ogg',
    'ogg': 'audio/ogg',
    'mp3': 'audio/mpeg',
}

_CHANNEL_MARKERS = ('/channel/', '/c/', '/user/', '/@')


class YtDlpGateway:
    """ExtractionGateway backed by yt-dlp.

    A fresh YoutubeDL instance is created per call, so one gateway can be
    shared across threads.
    """

    def __init__(self, page_size: int = 20, socket_timeout: int = 15,
                 extra_options: Optional[Dict[str, Any]] = None):
        """Initialize the gateway.

        Args:
            page_size: Number of search entries per returned batch
            socket_timeout: Network timeout in seconds passed to yt-dlp
            extra_options: Additional yt-dlp options merged over the defaults
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.socket_timeout = socket_timeout
        self.extra_options = dict(extra_options or {})

    def _options(self, **overrides) -> Dict[str, Any]:
        opts = {
            'quiet': True,
            'no_warnings': True,
            'skip_download': True,
            'socket_timeout': self.socket_timeout,
        }
        opts.update(self.extra_options)
        opts.update(overrides)
        return opts

    def _extract(self, url: str, opts: Dict[str, Any]) -> Dict[str, Any]:
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                info = ydl.extract_info(url, download=False)
        except (DownloadError, ExtractorError) as e:
            raise _translate_error(e, url) from e
        if not info:
            raise ExtractionError(f"yt-dlp returned no info for {url}")
        return info

    def search(self, text: str, kinds: Iterable[str], token: Optional[str] = None) -> ItemBatch:
        """Return one page of search results.

        Args:
            text: Search text
            kinds: Upstream kinds to filter on; a single known kind applies a filter
            token: Offset returned by the previous batch, None for the first page

        Returns:
            ItemBatch with at most page_size items
        """
        start = _parse_token(token)
        kinds = list(kinds or [])
        params = {'search_query': text}
        if len(kinds) == 1 and kinds[0] in _SEARCH_FILTERS:
            params['sp'] = _SEARCH_FILTERS[kinds[0]]
        url = f"{SEARCH_URL}?{urlencode(params)}"

        # One extra entry tells us whether another page exists.
        end = start + self.page_size
        info = self._extract(url, self._options(
            extract_flat='in_playlist',
            playlist_items=f"{start}-{end}",
        ))

        entries = [e for e in (info.get('entries') or []) if e]
        has_more = len(entries) > self.page_size
        items = [_to_raw_item(e) for e in entries[:self.page_size]]
        logger.debug(f"Search '{text}' from {start}: {len(items)} items, has_more={has_more}")
        return ItemBatch(
            items=items,
            has_more=has_more,
            next_token=str(end) if has_more else None,
        )

    def resolve_streams(self, item_id: str) -> List[StreamVariant]:
        """Return audio-only stream variants for a video, in upstream order."""
        url = item_id if item_id.startswith(('http://', 'https://')) else WATCH_URL + item_id
        info = self._extract(url, self._options(noplaylist=True))

        variants = []
        for fmt in info.get('formats') or []:
            if not fmt.get('url'):
                continue
            if fmt.get('vcodec') != 'none' or fmt.get('acodec') in (None, 'none'):
                continue
            variants.append(_to_stream_variant(fmt))
        return variants


def _parse_token(token: Optional[str]) -> int:
    if token is None:
        return 1
    try:
        start = int(token)
    except (TypeError, ValueError):
        raise ExtractionError(f"Invalid continuation token: {token!r}")
    if start < 1:
        raise ExtractionError(f"Invalid continuation token: {token!r}")
    return start


def _translate_error(error: Exception, url: str) -> Exception:
    message = str(error)
    lowered = message.lower()
    if 'unavailable' in lowered or 'not available' in lowered or '404' in lowered:
        return NotFound(f"{url}: {message}")
    if 'timed out' in lowered or '429' in lowered or 'http error 5' in lowered \
            or 'unable to download' in lowered:
        return TemporaryFailure(f"{url}: {message}")
    return ExtractionError(f"{url}: {message}")


def classify_entry(entry: Dict[str, Any]) -> str:
    """Tag a flat yt-dlp entry with the kind of item it points at."""
    url = entry.get('url') or ''
    if entry.get('ie_key') == 'Youtube' or '/watch?' in url or '/shorts/' in url:
        return STREAM
    if 'list=' in url:
        return PLAYLIST
    if any(marker in url for marker in _CHANNEL_MARKERS):
        return CHANNEL
    return entry.get('_type') or 'unknown'


def _thumbnail(entry: Dict[str, Any]) -> Optional[str]:
    thumbnails = entry.get('thumbnails') or []
    if thumbnails and thumbnails[-1].get('url'):
        return thumbnails[-1]['url']
    return entry.get('thumbnail')


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_raw_item(entry: Dict[str, Any]) -> RawItem:
    kind = classify_entry(entry)
    url = entry.get('url') or ''
    if kind == STREAM and not url.startswith('http') and entry.get('id'):
        url = WATCH_URL + entry['id']
    return RawItem(
        kind=kind,
        url=url,
        name=entry.get('title') or entry.get('channel') or '',
        thumbnail_url=_thumbnail(entry),
        duration=_optional_int(entry.get('duration')),
        uploader_name=entry.get('channel') or entry.get('uploader'),
        uploader_url=entry.get('channel_url') or entry.get('uploader_url'),
        item_count=_optional_int(entry.get('playlist_count')),
    )


def _to_stream_variant(fmt: Dict[str, Any]) -> StreamVariant:
    ext = fmt.get('audio_ext') if fmt.get('audio_ext') not in (None, 'none') else fmt.get('ext')
    mime_type = _MIME_BY_EXT.get(ext, f"audio/{ext}") if ext else None

    abr = fmt.get('abr')
    average_bitrate = int(round(abr * 1000)) if abr is not None else None

    content_length = fmt.get('filesize')
    if content_length is None:
        content_length = fmt.get('filesize_approx')

    return StreamVariant(
        url=fmt['url'],
        mime_type=mime_type,
        average_bitrate=average_bitrate,
        content_length=_optional_int(content_length),
        format_label=fmt.get('format_note') or fmt.get('format_id'),
    )
