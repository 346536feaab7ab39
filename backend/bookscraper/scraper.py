"""
List and detail scrapers for the books catalogue.

Both scrapers compose the page fetcher with a field extractor and
return either records or the FetchFailure describing what went wrong.
"""

from dataclasses import dataclass, field
from typing import List, Union
import logging

from .base import FetchFailure, SummaryRecord, DetailRecord, is_failure
from .config import Settings
from .crawlers.fetcher import fetch_page, RetryPolicy
from .utils.extractors import parse_document, extract_summaries, extract_detail
from .utils.urls import resolve_url, resolve_thumbnail

logger = logging.getLogger(__name__)


@dataclass
class ScrapeOptions:
    """Navigation and URL settings shared by both scrapers."""
    base_url: str = 'https://books.toscrape.com/'
    catalogue_url: str = 'https://books.toscrape.com/catalogue/'
    timeout_ms: int = 5000
    wait_until: str = 'networkidle'
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    log_progress: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> 'ScrapeOptions':
        return cls(
            base_url=settings.base_url,
            catalogue_url=settings.catalogue_url,
            timeout_ms=settings.navigation_timeout_ms,
            wait_until=settings.wait_until,
            retry_policy=RetryPolicy(
                max_attempts=settings.retry_max_attempts,
                backoff_seconds=settings.retry_backoff_seconds,
            ),
            log_progress=settings.log_progress,
        )

    def progress(self, message: str):
        if self.log_progress:
            logger.info(message)
        else:
            logger.debug(message)


async def scrape_page(page, page_url: str, options: ScrapeOptions) -> Union[List[SummaryRecord], FetchFailure]:
    """
    Scrape one catalogue list page.

    Args:
        page: Page to navigate (list context)
        page_url: Absolute URL of the list page
        options: Navigation and URL settings

    Returns:
        SummaryRecords with absolute links, an empty list for a page with
        no entries, or the FetchFailure when the page could not be loaded.
    """
    options.progress(f"# Navigating to {page_url}")
    document = await fetch_page(
        page, page_url,
        timeout_ms=options.timeout_ms,
        wait_until=options.wait_until,
        retry_policy=options.retry_policy,
    )
    if is_failure(document):
        logger.error(f"[X] Error while scraping {page_url}: {document.message}")
        return document

    options.progress(f"# Page loaded: \"{document.title}\"")

    try:
        books = extract_summaries(parse_document(document))
        for book in books:
            book.link = resolve_url(book.link, options.catalogue_url)
            if book.thumbnail:
                book.thumbnail = resolve_url(book.thumbnail, document.url)
    except Exception as e:
        logger.error(f"[X] Error while extracting {page_url}: {e}")
        return FetchFailure(message=str(e), url=page_url)

    options.progress(f"# Scraped {len(books)} books")
    return books


async def scrape_detail(page, item_url: str, options: ScrapeOptions) -> Union[DetailRecord, FetchFailure]:
    """
    Scrape one item detail page.

    Args:
        page: Page to navigate (detail context)
        item_url: Item URL, absolute or relative to the site root
        options: Navigation and URL settings

    Returns:
        DetailRecord with an absolute thumbnail, or the FetchFailure
    """
    full_url = resolve_url(item_url, options.base_url)
    options.progress(f"# Navigating to book detail: {full_url}")

    document = await fetch_page(
        page, full_url,
        timeout_ms=options.timeout_ms,
        wait_until=options.wait_until,
        retry_policy=options.retry_policy,
    )
    if is_failure(document):
        logger.error(f"[X] Error while scraping book detail {full_url}: {document.message}")
        return document

    options.progress(f"# Book detail page loaded: \"{document.title}\"")

    try:
        details = extract_detail(parse_document(document))
        if details.thumbnail:
            details.thumbnail = resolve_thumbnail(details.thumbnail, options.base_url)
    except Exception as e:
        logger.error(f"[X] Error while extracting book detail {full_url}: {e}")
        return FetchFailure(message=str(e), url=full_url)

    options.progress(f"# Successfully scraped details for book: \"{details.title}\"")
    return details
