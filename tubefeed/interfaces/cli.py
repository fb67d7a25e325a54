import argparse
import logging
import sys
import time
from typing import List, Optional

from dotenv import load_dotenv

from tubefeed.application.extension import YouTubeAudioExtension
from tubefeed.application.feeds import Feed
from tubefeed.application.paging import CursorPager, iter_pages
from tubefeed.crosscutting.config import ConfigError, get_config_manager
from tubefeed.crosscutting.logging import setup_logging
from tubefeed.domain.entities import Artist, Playlist, Shelf, Track
from tubefeed.infrastructure.factory import create_extension


class CLI:
    """Command Line Interface for tubefeed."""

    def __init__(self, extension: Optional[YouTubeAudioExtension] = None):
        """Initialize CLI.

        Args:
            extension: Prebuilt extension; built from configuration when omitted
        """
        self.parser = self._create_parser()
        self._extension = extension
        self._start_time = None

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog='tubefeed',
            description='Browse YouTube feeds and resolve audio streams'
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        search_parser = subparsers.add_parser('search', help='Search and page through results')
        search_parser.add_argument('query', help='Search text')
        search_parser.add_argument(
            '--tab',
            default=None,
            help='Tab to page through (Videos, Playlists, Channels; default: Videos)'
        )
        self._add_common_feed_args(search_parser)

        home_parser = subparsers.add_parser('home', help='Show the home feed')
        home_parser.add_argument(
            '--tab',
            default=None,
            help='Home tab (Trending, Music, Recommended); omit for the browse page'
        )
        self._add_common_feed_args(home_parser)

        resolve_parser = subparsers.add_parser('resolve', help='List audio streams for a track')
        resolve_parser.add_argument('track', help='Track URL or video id')
        resolve_parser.add_argument(
            '--log-level',
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            default='WARNING',
            help='Set logging level'
        )

        return parser

    def _add_common_feed_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            '--pages',
            type=int,
            default=1,
            help='Maximum number of pages to load (default: 1)'
        )
        parser.add_argument(
            '--log-level',
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            default='WARNING',
            help='Set logging level'
        )

    def _validate_arguments(self, args: argparse.Namespace) -> None:
        """Validate CLI arguments."""
        pages = getattr(args, 'pages', None)
        if pages is not None and pages < 1:
            raise ValueError("--pages must be at least 1")

    def _get_extension(self) -> YouTubeAudioExtension:
        if self._extension is None:
            settings = get_config_manager().load_settings()
            self._extension = create_extension(settings)
        return self._extension

    def _print_pages(self, pager: CursorPager, max_pages: int) -> int:
        """Print shelves from up to max_pages pages; return the number of items shown."""
        shown = 0
        for index, page in enumerate(iter_pages(pager, max_pages=max_pages), start=1):
            print(f"--- page {index} ---")
            for shelf in page.items:
                shown += self._print_shelf(shelf)
            if page.next_cursor is None:
                print("(end of results)")
        if shown == 0:
            print("No results.")
        return shown

    def _print_shelf(self, shelf: Shelf) -> int:
        print(f"[{shelf.title}]")
        for item in shelf.items:
            print("  " + format_item(item))
        return len(shelf.items)

    def _print_tabs(self, feed: Feed) -> None:
        if feed.tabs:
            print("Tabs: " + ", ".join(t.label for t in feed.tabs))

    def _search(self, args: argparse.Namespace) -> None:
        feed = self._get_extension().load_search_feed(args.query)
        self._print_tabs(feed)
        # Searching without --tab pages the first tab
        tab = args.tab or (feed.tabs[0].id if feed.tabs else None)
        self._print_pages(feed.resolve(tab), args.pages)

    def _home(self, args: argparse.Namespace) -> None:
        feed = self._get_extension().load_home_feed()
        self._print_tabs(feed)
        self._print_pages(feed.resolve(args.tab), args.pages)

    def _resolve(self, args: argparse.Namespace) -> None:
        track = Track(id=args.track, title=args.track)
        resolved = self._get_extension().load_track(track)
        if not resolved.streamables:
            print("No playable streams found.")
            return
        for streamable in resolved.streamables:
            bitrate = f"{streamable.bitrate // 1000} kbps" if streamable.bitrate is not None else "? kbps"
            size = f"{streamable.size} bytes" if streamable.size is not None else "? bytes"
            print(f"{streamable.quality or '-'} | {streamable.format} | {bitrate} | {size}")
            print(f"  {streamable.id}")

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Run the CLI."""
        self._start_time = time.time()

        try:
            args = self.parser.parse_args(argv)

            if not args.command:
                self.parser.print_help()
                sys.exit(1)

            setup_logging(args.log_level)
            self._validate_arguments(args)

            if args.command == 'search':
                self._search(args)
            elif args.command == 'home':
                self._home(args)
            elif args.command == 'resolve':
                self._resolve(args)
            else:
                self.parser.print_help()
                sys.exit(1)

        except KeyboardInterrupt:
            logger = logging.getLogger(__name__)
            logger.warning("Operation cancelled by user")
            sys.exit(130)
        except (ConfigError, ValueError) as e:
            logger = logging.getLogger(__name__)
            logger.error(f"CLI error: {e}")
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        finally:
            logger = logging.getLogger(__name__)
            logger.debug(f"CLI execution time: {time.time() - self._start_time:.2f}s")


def format_item(item) -> str:
    """One-line human description of a media item."""
    if isinstance(item, Track):
        artists = ", ".join(a.name for a in item.artists) or "unknown"
        duration = f"{item.duration // 60}:{item.duration % 60:02d}" if item.duration is not None else "--:--"
        return f"{item.title} - {artists} [{duration}] {item.id}"
    if isinstance(item, Playlist):
        count = item.track_count if item.track_count is not None else "?"
        return f"{item.title} ({count} tracks) {item.id}"
    if isinstance(item, Artist):
        return f"{item.name} {item.id or ''}".rstrip()
    return str(item)


def main():
    """Main entry point."""
    # Values already in the environment take precedence over .env
    load_dotenv()
    cli = CLI()
    cli.run()


if __name__ == '__main__':
    main()
