#!/usr/bin/env python3
"""
tubefeed HTTP Server Runner
"""

from dotenv import load_dotenv

from tubefeed.crosscutting.config import get_config_manager
from tubefeed.crosscutting.logging import setup_logging
from tubefeed.interfaces.http import HTTPServer


def main():
    """Run the HTTP server."""
    load_dotenv()
    settings = get_config_manager().load_settings()
    setup_logging(settings.log_level)
    server = HTTPServer(
        host='localhost',
        port=3000,
        debug=False
    )
    server.run()


if __name__ == '__main__':
    main()
