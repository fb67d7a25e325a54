import os
from dataclasses import dataclass, field
from typing import Dict, Optional
from pathlib import Path

from dotenv import dotenv_values


class ConfigError(Exception):
    """Configuration error."""
    pass


DEFAULT_HOME_QUERIES = {
    'Trending': 'trending music',
    'Music': 'music',
    'Recommended': 'popular music',
}


@dataclass(frozen=True)
class Settings:
    """Runtime settings for feeds and the extraction gateway."""

    page_size: int = 20
    socket_timeout: int = 15
    log_level: str = 'INFO'
    default_content_url: Optional[str] = None
    home_queries: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HOME_QUERIES))


class ConfigManager:
    """Loads settings from the process environment and a .env file.

    Process environment wins over the .env file in the config directory.
    """

    def __init__(self, config_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / '.tubefeed'
        self.env_file = self.config_dir / '.env'

    def load_env_vars(self) -> Dict[str, str]:
        """Load variables from the .env file, if any."""
        if not self.env_file.exists():
            return {}
        try:
            values = dotenv_values(self.env_file)
        except (IOError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to load .env file {self.env_file}: {e}")
        return {k: v for k, v in values.items() if v is not None}

    def _lookup(self, env_vars: Dict[str, str], key: str) -> Optional[str]:
        value = os.getenv(key)
        if value is None or not value.strip():
            value = env_vars.get(key)
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    def _int(self, env_vars: Dict[str, str], key: str, default: int) -> int:
        raw = self._lookup(env_vars, key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ConfigError(f"{key} must be an integer, got {raw!r}")
        if value <= 0:
            raise ConfigError(f"{key} must be positive, got {value}")
        return value

    def load_settings(self) -> Settings:
        """Build Settings from environment and .env values."""
        env_vars = self.load_env_vars()

        home_queries = {}
        for tab, default_query in DEFAULT_HOME_QUERIES.items():
            key = f"TUBEFEED_HOME_{tab.upper()}"
            home_queries[tab] = self._lookup(env_vars, key) or default_query

        return Settings(
            page_size=self._int(env_vars, 'TUBEFEED_PAGE_SIZE', 20),
            socket_timeout=self._int(env_vars, 'TUBEFEED_SOCKET_TIMEOUT', 15),
            log_level=(self._lookup(env_vars, 'TUBEFEED_LOG_LEVEL') or 'INFO').upper(),
            default_content_url=self._lookup(env_vars, 'TUBEFEED_DEFAULT_CONTENT_URL'),
            home_queries=home_queries,
        )


# Global instance
config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    """Get global config manager instance."""
    return config_manager
