"""Crawler implementations for different rendering engines."""

from .browser import BrowserCrawler
from .static import StaticCrawler
from .fetcher import fetch_page, RetryPolicy, NO_RETRY

__all__ = ['BrowserCrawler', 'StaticCrawler', 'fetch_page', 'RetryPolicy', 'NO_RETRY']
