import os
import logging
from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from flask import Flask, request, jsonify

from tubefeed.application.extension import YouTubeAudioExtension
from tubefeed.application.safe import SafeExecutor, default_executor
from tubefeed.application.streams import ResolutionState
from tubefeed.crosscutting.config import ConfigError, get_config_manager
from tubefeed.domain.entities import Streamable, Track
from tubefeed.infrastructure.factory import create_extension


def to_json(value: Any) -> Any:
    """Convert entities (nested dataclasses and enums) into JSON-ready values."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    return value


class HTTPServer:
    """HTTP interface exposing feeds and track resolution as JSON."""

    def __init__(self, host: str = 'localhost', port: int = 3000, debug: bool = False,
                 extension: Optional[YouTubeAudioExtension] = None,
                 executor: Optional[SafeExecutor] = None):
        """Initialize HTTP server."""
        self.host = host
        self.port = port
        self.debug = debug
        self.app = Flask(__name__)
        self.logger = logging.getLogger(__name__)

        self.version = "0.1.0"
        self.commit = os.getenv('GIT_COMMIT', 'unknown')

        self._extension = extension
        self.executor = executor or (extension.executor if extension else default_executor)

        self._setup_routes()

    @property
    def extension(self) -> YouTubeAudioExtension:
        if self._extension is None:
            settings = get_config_manager().load_settings()
            self._extension = create_extension(settings, executor=self.executor)
        return self._extension

    def _setup_routes(self) -> None:
        """Setup Flask routes."""

        @self.app.errorhandler(ConfigError)
        def config_error(e):
            self.logger.error(f"Configuration error: {e}")
            return jsonify({
                'error': 'Configuration error',
                'details': str(e)
            }), 500

        @self.app.route('/health', methods=['GET'])
        def health_check():
            """Health check endpoint."""
            return jsonify({
                'status': 'healthy',
                'version': self.version,
                'commit': self.commit,
                'fallbacks': self.executor.fallback_counts(),
                'timestamp': datetime.now().isoformat()
            }), 200

        @self.app.route('/search/tabs', methods=['GET'])
        def search_tabs():
            feed = self.extension.load_search_feed(request.args.get('q', ''))
            return jsonify({'tabs': to_json(feed.tabs)}), 200

        @self.app.route('/search', methods=['GET'])
        def search():
            """One page of search results; a blank query returns the browse page."""
            feed = self.extension.load_search_feed(request.args.get('q', ''))
            tab = request.args.get('tab') or (feed.tabs[0].id if feed.tabs else None)
            page = feed.resolve(tab).load(request.args.get('cursor') or None)
            return jsonify(to_json(page)), 200

        @self.app.route('/home/tabs', methods=['GET'])
        def home_tabs():
            feed = self.extension.load_home_feed()
            return jsonify({'tabs': to_json(feed.tabs)}), 200

        @self.app.route('/home', methods=['GET'])
        def home():
            feed = self.extension.load_home_feed()
            page = feed.resolve(request.args.get('tab') or None).load(request.args.get('cursor') or None)
            return jsonify(to_json(page)), 200

        @self.app.route('/track', methods=['GET'])
        def track():
            """Resolve streams for a track id."""
            track_id = request.args.get('id')
            if not track_id:
                return jsonify({
                    'error': 'Missing track id'
                }), 400

            original = Track(id=track_id, title=request.args.get('title', ''))
            resolved, state = self.extension.resolver.resolve_with_state(original)
            return jsonify({
                'track': to_json(resolved),
                'state': state.value,
                'playable': state is ResolutionState.RESOLVED
            }), 200

        @self.app.route('/media', methods=['POST'])
        def media():
            """Turn a chosen streamable into playable media."""
            body = request.get_json(silent=True) or {}
            if not body.get('id'):
                return jsonify({
                    'error': 'Missing streamable id'
                }), 400

            streamable = Streamable(
                id=body['id'],
                quality=body.get('quality', ''),
                format=body.get('format') or 'audio/*',
                bitrate=body.get('bitrate'),
                size=body.get('size'),
            )
            return jsonify(to_json(self.extension.load_streamable_media(streamable))), 200

        @self.app.route('/settings', methods=['GET'])
        def settings():
            return jsonify({'items': to_json(self.extension.get_setting_items())}), 200

        @self.app.route('/', methods=['GET'])
        def root():
            """Root endpoint with basic info."""
            return jsonify({
                'service': 'tubefeed HTTP Interface',
                'version': self.version,
                'endpoints': {
                    'health': '/health',
                    'search_tabs': '/search/tabs?q=',
                    'search': '/search?q=&tab=&cursor=',
                    'home_tabs': '/home/tabs',
                    'home': '/home?tab=&cursor=',
                    'track': '/track?id=',
                    'media': '/media',
                    'settings': '/settings'
                }
            }), 200

    def run(self) -> None:
        """Run the HTTP server."""
        self.logger.info(f"Starting tubefeed HTTP server on {self.host}:{self.port}")
        self.app.run(
            host=self.host,
            port=self.port,
            debug=self.debug
        )


def create_app(extension: Optional[YouTubeAudioExtension] = None) -> Flask:
    """Create Flask app for testing."""
    server = HTTPServer(extension=extension)
    return server.app


if __name__ == '__main__':
    server = HTTPServer()
    server.run()
