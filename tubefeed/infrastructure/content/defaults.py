import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from tubefeed.domain.errors import ExtractionError, TemporaryFailure
from tubefeed.domain.ports import STREAM, RawItem

logger = logging.getLogger(__name__)


class StaticDefaultContent:
    """Browse content from a fixed list. Empty unless items are given."""

    def __init__(self, items: Optional[Sequence[RawItem]] = None):
        self._items = list(items or [])

    def load_default_items(self) -> List[RawItem]:
        return list(self._items)


class RemoteDefaultContent:
    """Browse content fetched as a JSON list of records from an HTTP endpoint.

    Each record needs at least a url; kind defaults to a stream item. Other
    keys mirror RawItem fields.
    """

    def __init__(self, url: str, session: Optional[requests.Session] = None, timeout: int = 10):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def load_default_items(self) -> List[RawItem]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TemporaryFailure(f"Failed to fetch default content from {self.url}: {e}") from e

        if response.status_code != 200:
            raise TemporaryFailure(
                f"Default content request failed: {response.status_code} - {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ExtractionError(f"Default content is not valid JSON: {e}") from e

        records = payload.get('items') if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise ExtractionError("Default content must be a JSON list of records")

        items = [raw_item_from_dict(r) for r in records if isinstance(r, dict) and r.get('url')]
        logger.info(f"Loaded {len(items)} default items from {self.url}")
        return items


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def raw_item_from_dict(record: Dict[str, Any]) -> RawItem:
    """Build a RawItem from a JSON record, coercing loosely typed values."""
    return RawItem(
        kind=str(record.get('kind') or STREAM),
        url=str(record['url']),
        name=_optional_str(record.get('name')) or '',
        thumbnail_url=_optional_str(record.get('thumbnail_url')),
        duration=_optional_int(record.get('duration')),
        uploader_name=_optional_str(record.get('uploader_name')),
        uploader_url=_optional_str(record.get('uploader_url')),
        item_count=_optional_int(record.get('item_count')),
    )
