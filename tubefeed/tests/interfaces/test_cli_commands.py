import logging
from unittest.mock import Mock, patch

import pytest

from tubefeed.application.extension import YouTubeAudioExtension
from tubefeed.application.safe import SafeExecutor
from tubefeed.crosscutting.config import ConfigError
from tubefeed.domain.entities import Artist, Playlist, Track
from tubefeed.domain.ports import StreamVariant
from tubefeed.infrastructure.content.defaults import RemoteDefaultContent, StaticDefaultContent
from tubefeed.interfaces.cli import CLI, format_item
from tubefeed.tests.fakes import stream_item, three_pages


class TestCLI:
    """Tests for CLI commands against an in-memory gateway."""

    def setup_method(self):
        self.gateway = three_pages()
        self.gateway.streams = {
            "https://www.youtube.com/watch?v=v1": [
                StreamVariant(url="https://cdn/140", mime_type="audio/mp4", average_bitrate=129000,
                              content_length=4000, format_label="medium"),
                StreamVariant(url="https://cdn/251", mime_type="audio/webm"),
            ]
        }
        self.extension = YouTubeAudioExtension(self.gateway, StaticDefaultContent([stream_item(9)]),
                                               executor=SafeExecutor())
        self.cli = CLI(extension=self.extension)

    def teardown_method(self):
        logger = logging.getLogger('tubefeed')
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)

    def test_parser_search_defaults(self):
        args = self.cli.parser.parse_args(['search', 'lofi'])
        assert args.command == 'search'
        assert args.query == 'lofi'
        assert args.tab is None
        assert args.pages == 1

    def test_search_prints_first_page(self, capsys):
        self.cli.run(['search', 'test'])
        out = capsys.readouterr().out
        assert "Tabs: Videos, Playlists, Channels" in out
        assert "[Videos - Tracks]" in out
        assert "Video 1 - Uploader 1 [1:01]" in out
        assert "Video 3" not in out
        assert "(end of results)" not in out

    def test_search_follows_pages(self, capsys):
        self.cli.run(['search', 'test', '--pages', '5'])
        out = capsys.readouterr().out
        assert "--- page 3 ---" in out
        assert "--- page 4 ---" not in out
        assert "Video 6" in out
        assert "(end of results)" in out

    def test_search_tab_is_routed(self, capsys):
        self.cli.run(['search', 'test', '--tab', 'Channels'])
        assert self.gateway.search_calls[0][1] == {'channels'}

    def test_home_without_tab_shows_browse_page(self, capsys):
        self.cli.run(['home'])
        out = capsys.readouterr().out
        assert "Tabs: Trending, Music, Recommended" in out
        assert "Video 9" in out
        assert self.gateway.search_calls == []

    def test_home_renders_remote_items_with_string_durations(self, capsys):
        session = Mock()
        response = Mock(status_code=200, text="")
        response.json.return_value = [{"url": "https://v.example/1", "name": "A", "duration": "213"}]
        session.get.return_value = response
        content = RemoteDefaultContent("https://picks.example/items.json", session=session)
        extension = YouTubeAudioExtension(self.gateway, content, executor=SafeExecutor())

        page = extension.load_home_feed().resolve(None).load()
        assert page.items[0].items[0].duration == 213

        CLI(extension=extension).run(['home'])
        assert "A - unknown [3:33]" in capsys.readouterr().out

    def test_resolve_lists_streams(self, capsys):
        self.cli.run(['resolve', 'https://www.youtube.com/watch?v=v1'])
        out = capsys.readouterr().out
        assert "medium | audio/mp4 | 129 kbps | 4000 bytes" in out
        assert "- | audio/webm | ? kbps | ? bytes" in out

    def test_resolve_without_streams(self, capsys):
        self.gateway.stream_error = RuntimeError("boom")
        self.cli.run(['resolve', 'https://www.youtube.com/watch?v=v1'])
        assert "No playable streams found." in capsys.readouterr().out

    def test_failed_search_prints_no_results(self, capsys):
        self.gateway.search_error = RuntimeError("boom")
        self.cli.run(['search', 'test'])
        assert "No results." in capsys.readouterr().out

    def test_no_command_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            self.cli.run([])
        assert exc.value.code == 1

    def test_invalid_pages_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            self.cli.run(['search', 'test', '--pages', '0'])
        assert exc.value.code == 1

    @patch('tubefeed.interfaces.cli.get_config_manager')
    def test_config_error_exits_1(self, mock_get_manager):
        mock_get_manager.return_value.load_settings.side_effect = ConfigError("bad page size")
        cli = CLI()
        with pytest.raises(SystemExit) as exc:
            cli.run(['search', 'test'])
        assert exc.value.code == 1


def test_format_item_variants():
    assert format_item(Track(id="u", title="t", duration=None)) == "t - unknown [--:--] u"
    assert format_item(Playlist(id="p", title="P", track_count=None)) == "P (? tracks) p"
    assert format_item(Artist(id=None, name="A")) == "A"
