#!/usr/bin/env python3
"""
Command line entry point for the book crawler.

Usage:
    bookscraper                          # crawl 20 pages with Chromium
    bookscraper --max-pages 3 --engine static
    python -m bookscraper --stop-on-empty --retries 2
"""

import argparse
import asyncio
import logging
import re
import sys
from pathlib import Path

from .base import Colors
from .config import Settings, settings as default_settings
from .crawlers import BrowserCrawler, StaticCrawler
from .orchestrator import CrawlOrchestrator
from .sink import JsonSink

logger = logging.getLogger(__name__)


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


def configure_logging(settings: Settings, log_to_file: bool = True):
    """Console handler keeps colors, the file handler strips them."""
    handlers = []

    if log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
        file_handler.setFormatter(ColorStripFormatter(settings.log_format))
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(settings.log_format))
    handlers.append(console_handler)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='bookscraper',
        description='Crawl the books catalogue and save the results as JSON.',
    )
    parser.add_argument('--base-url', help='Catalogue origin, e.g. https://books.toscrape.com/')
    parser.add_argument('--max-pages', type=int, help='Number of list pages to crawl')
    parser.add_argument('--engine', choices=['browser', 'static'], help='Rendering engine')
    parser.add_argument('--output-dir', type=Path, help='Directory for JSON output')
    parser.add_argument('--stop-on-empty', action='store_true', help='Stop at the first list page with no books')
    parser.add_argument('--retries', type=int, help='Extra navigation attempts after a failure')
    parser.add_argument('--timeout-ms', type=int, help='Navigation timeout in milliseconds')
    parser.add_argument('--no-headless', action='store_true', help='Show the browser window')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING or ERROR')
    parser.add_argument('--no-log-file', action='store_true', help='Log to the console only')
    return parser


def apply_arguments(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a validated copy of ``settings`` with command line overrides applied."""
    overrides = {}
    if args.base_url:
        overrides['base_url'] = args.base_url
    if args.max_pages is not None:
        overrides['max_pages'] = args.max_pages
    if args.engine:
        overrides['engine'] = args.engine
    if args.output_dir is not None:
        overrides['output_dir'] = args.output_dir
    if args.stop_on_empty:
        overrides['stop_on_empty_page'] = True
    if args.retries is not None:
        overrides['retry_max_attempts'] = 1 + max(0, args.retries)
    if args.timeout_ms is not None:
        overrides['navigation_timeout_ms'] = args.timeout_ms
    if args.no_headless:
        overrides['headless'] = False
    if args.log_level:
        overrides['log_level'] = args.log_level
    # model_copy skips validation
    return settings.model_validate({**settings.model_dump(), **overrides})


def build_crawler(settings: Settings):
    """Crawler for the configured engine."""
    if settings.engine == 'static':
        return StaticCrawler(timeout=settings.navigation_timeout_ms / 1000)
    if settings.engine == 'browser':
        return BrowserCrawler(
            headless=settings.headless,
            user_agent=settings.user_agent,
            blocked_resource_types=settings.blocked_resource_types,
        )
    raise ValueError(f"Unknown engine: {settings.engine}")


async def crawl(settings: Settings):
    orchestrator = CrawlOrchestrator(
        build_crawler(settings),
        JsonSink(settings.output_dir),
        settings=settings,
    )
    return await orchestrator.run()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_arguments(default_settings, args)
    configure_logging(settings, log_to_file=not args.no_log_file)

    try:
        asyncio.run(crawl(settings))
    except KeyboardInterrupt:
        logger.warning(f"{Colors.yellow('[!]')} Interrupted")
        return 130
    except Exception as e:
        logger.error(f"Unhandled error in main function: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
