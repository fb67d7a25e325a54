from unittest.mock import Mock

import pytest
import requests

from tubefeed.domain.errors import ExtractionError, TemporaryFailure
from tubefeed.domain.ports import RawItem
from tubefeed.infrastructure.content.defaults import (
    RemoteDefaultContent, StaticDefaultContent, raw_item_from_dict
)


def test_static_content_defaults_to_empty():
    assert StaticDefaultContent().load_default_items() == []


def test_static_content_returns_copy():
    items = [RawItem(kind="stream", url="u1")]
    content = StaticDefaultContent(items)
    loaded = content.load_default_items()
    loaded.clear()
    assert content.load_default_items() == items


class TestRemoteDefaultContent:
    """Tests for default content fetched over HTTP."""

    def setup_method(self):
        self.session = Mock()
        self.content = RemoteDefaultContent("https://picks.example/items.json",
                                            session=self.session, timeout=3)

    def _respond(self, status_code=200, payload=None, text=""):
        response = Mock()
        response.status_code = status_code
        response.text = text
        response.json.return_value = payload
        self.session.get.return_value = response

    def test_loads_list_payload(self):
        self._respond(payload=[
            {"url": "https://www.youtube.com/watch?v=a", "name": "A", "duration": 100},
            {"kind": "playlist", "url": "https://www.youtube.com/playlist?list=PL", "name": "P"},
            {"name": "missing url"},
        ])

        items = self.content.load_default_items()

        self.session.get.assert_called_once_with("https://picks.example/items.json", timeout=3)
        assert [i.kind for i in items] == ["stream", "playlist"]
        assert items[0].duration == 100

    def test_loads_wrapped_payload(self):
        self._respond(payload={"items": [{"url": "u"}]})
        assert len(self.content.load_default_items()) == 1

    def test_non_200_raises_temporary_failure(self):
        self._respond(status_code=503, text="unavailable")
        with pytest.raises(TemporaryFailure):
            self.content.load_default_items()

    def test_connection_error_raises_temporary_failure(self):
        self.session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TemporaryFailure):
            self.content.load_default_items()

    def test_invalid_json_raises_extraction_error(self):
        response = Mock(status_code=200, text="<html>")
        response.json.side_effect = ValueError("no json")
        self.session.get.return_value = response
        with pytest.raises(ExtractionError):
            self.content.load_default_items()

    def test_wrong_shape_raises_extraction_error(self):
        self._respond(payload={"items": "nope"})
        with pytest.raises(ExtractionError):
            self.content.load_default_items()


def test_raw_item_from_dict_defaults():
    item = raw_item_from_dict({"url": "u"})
    assert item == RawItem(kind="stream", url="u", name="")


def test_raw_item_from_dict_coerces_loose_values():
    item = raw_item_from_dict({
        "url": "u",
        "name": None,
        "duration": "213",
        "item_count": "twelve",
        "uploader_name": None,
    })
    assert item.name == ""
    assert item.duration == 213
    assert item.item_count is None
    assert item.uploader_name is None
