import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from tubefeed.crosscutting.config import (
    ConfigError, ConfigManager, DEFAULT_HOME_QUERIES, Settings
)


class TestConfigManager:
    """Tests for ConfigManager."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.manager = ConfigManager(self.temp_dir)

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_initialization(self):
        assert self.manager.config_dir == Path(self.temp_dir)
        assert self.manager.env_file == Path(self.temp_dir) / '.env'

    def test_defaults_without_env(self):
        settings = self.manager.load_settings()
        assert settings == Settings()
        assert settings.page_size == 20
        assert settings.default_content_url is None
        assert settings.home_queries == DEFAULT_HOME_QUERIES

    def _write_env(self, text):
        self.manager.env_file.write_text(text)

    def test_reads_env_file(self):
        self._write_env(
            "TUBEFEED_PAGE_SIZE=10\n"
            "TUBEFEED_DEFAULT_CONTENT_URL=https://picks.example/items.json\n"
            "TUBEFEED_HOME_TRENDING=top hits\n"
        )
        settings = self.manager.load_settings()
        assert settings.page_size == 10
        assert settings.default_content_url == 'https://picks.example/items.json'
        assert settings.home_queries['Trending'] == 'top hits'
        assert settings.home_queries['Music'] == 'music'

    def test_process_env_wins_over_env_file(self):
        self._write_env("TUBEFEED_PAGE_SIZE=10\n")
        with patch.dict('os.environ', {'TUBEFEED_PAGE_SIZE': '30', 'TUBEFEED_LOG_LEVEL': 'debug'}):
            settings = self.manager.load_settings()
        assert settings.page_size == 30
        assert settings.log_level == 'DEBUG'

    def test_invalid_integer_raises(self):
        with patch.dict('os.environ', {'TUBEFEED_PAGE_SIZE': 'many'}):
            with pytest.raises(ConfigError, match='TUBEFEED_PAGE_SIZE'):
                self.manager.load_settings()

    def test_non_positive_integer_raises(self):
        with patch.dict('os.environ', {'TUBEFEED_SOCKET_TIMEOUT': '0'}):
            with pytest.raises(ConfigError):
                self.manager.load_settings()
