"""
Crawl orchestration.

Walks catalogue pages 1..max_pages, scrapes each book's detail page,
merges the results and hands them to the sink. Failures are contained
at the narrowest boundary that lets the crawl keep going:

- a list page that cannot be loaded contributes no books;
- a book whose detail page fails is kept as its bare summary;
- an exception escaping a whole page is logged and the next page runs;
- a fatal error still finalizes the run before it is re-raised.
"""

import asyncio
import time
from typing import List, Optional
import logging

from .base import (
    BookRecord,
    MergedRecord,
    RunResult,
    SummaryRecord,
    Colors,
    is_failure,
)
from .config import Settings, settings as default_settings
from .scraper import ScrapeOptions, scrape_page, scrape_detail
from .sink import JsonSink
from .utils.urls import resolve_url

logger = logging.getLogger(__name__)


class CrawlOrchestrator:
    """
    Sequential crawl over the catalogue.

    Usage:
        crawler = BrowserCrawler(headless=True)
        orchestrator = CrawlOrchestrator(crawler, JsonSink(Path('data')))
        result = await orchestrator.run()

    The crawler must be an async context manager exposing ``new_page()``
    and ``close_page(page)``. One list page is held for the whole run; a
    fresh detail page is opened for every catalogue page and closed before
    the next one starts.
    """

    def __init__(
        self,
        crawler,
        sink: JsonSink,
        settings: Optional[Settings] = None,
        options: Optional[ScrapeOptions] = None,
        list_scraper=scrape_page,
        detail_scraper=scrape_detail,
        sleep=asyncio.sleep,
    ):
        """
        Initialize the orchestrator.

        Args:
            crawler: BrowserCrawler, StaticCrawler or compatible
            sink: Output sink for per-book and combined files
            settings: Crawl settings (defaults to the global settings)
            options: Scrape options (derived from settings when omitted)
            list_scraper: Coroutine function scraping one list page
            detail_scraper: Coroutine function scraping one detail page
            sleep: Coroutine function used for pacing delays
        """
        self.crawler = crawler
        self.sink = sink
        self.settings = settings or default_settings
        self.options = options or ScrapeOptions.from_settings(self.settings)
        self.list_scraper = list_scraper
        self.detail_scraper = detail_scraper
        self.sleep = sleep
        self.result: Optional[RunResult] = None

    async def process_book(self, detail_page, book: SummaryRecord) -> BookRecord:
        """
        Scrape one book's detail page and merge it with its summary.

        Never raises: any failure degrades the book to its summary record.
        """
        try:
            book_url = resolve_url(book.link, self.settings.base_url)
            details = await self.detail_scraper(detail_page, book_url, self.options)

            if is_failure(details):
                logger.warning(f"   {Colors.red('✘')} Failed to fetch details for: {book.title} - {details.message}")
                record = book
            else:
                self.sink.write_detail(book.title, details)
                record = MergedRecord(book_title=book.title, book_link=book_url, book_details=details)
                logger.info(f"   {Colors.green('✔')} Fetched details for: {book.title}")

            await self.sleep(self.settings.item_delay_seconds)
            return record

        except Exception as e:
            logger.error(f"   {Colors.red('[ERR]')} Error processing book \"{book.title}\": {e}")
            return book

    async def scrape_catalogue_page(self, list_page, page_number: int) -> Optional[List[BookRecord]]:
        """
        Scrape list page ``page_number`` and every book on it.

        Returns:
            Records in listing order, or None when the list page failed.
        """
        max_pages = self.settings.max_pages
        page_url = self.settings.page_url(page_number)
        logger.info(f"{Colors.bold(f'[{page_number}/{max_pages}]')} Scraping {Colors.gray(page_url)}")

        summaries = await self.list_scraper(list_page, page_url, self.options)
        if is_failure(summaries):
            logger.error(f"{Colors.red('[X]')} Failed to scrape page {page_number}: {summaries.message}")
            return None

        logger.info(f"{Colors.green('[✔]')} Page {page_number}: Found {len(summaries)} books")
        if not summaries:
            return []

        records = []
        detail_page = await self.crawler.new_page()
        try:
            for book in summaries:
                records.append(await self.process_book(detail_page, book))
        finally:
            await self.crawler.close_page(detail_page)
        return records

    async def run(self) -> RunResult:
        """
        Main entry point - crawls every page and writes the combined result.

        Finalization runs exactly once, whichever way the page loop exits.

        Returns:
            The finalized RunResult

        Raises:
            Whatever fatal error escaped the crawl, after finalization.
        """
        books: List[BookRecord] = []
        failed_pages: List[int] = []
        pages_scraped = 0
        start_time = time.monotonic()

        logger.info(Colors.green('[!] Starting book scraper...'))

        try:
            async with self.crawler:
                logger.info(f"{Colors.green('[✔]')} Crawler started")
                list_page = await self.crawler.new_page()

                for page_number in range(1, self.settings.max_pages + 1):
                    try:
                        page_books = await self.scrape_catalogue_page(list_page, page_number)
                        if page_books is None:
                            failed_pages.append(page_number)
                            continue

                        books.extend(page_books)
                        pages_scraped += 1

                        if not page_books and self.settings.stop_on_empty_page:
                            logger.info(f"{Colors.yellow('[!]')} Page {page_number} is empty, stopping early")
                            break

                        await self.sleep(self.settings.page_delay_seconds)

                    except Exception as e:
                        failed_pages.append(page_number)
                        logger.exception(f"{Colors.bold(Colors.red('[X]'))} {Colors.red(f'Error processing page {page_number}: {e}')}")

        except Exception as e:
            logger.error(f"{Colors.bold(Colors.red('[X]'))} {Colors.red(f'Fatal error: {e}')}", exc_info=True)
            raise

        finally:
            self.result = self.finalize(books, pages_scraped, start_time, failed_pages)

        return self.result

    def finalize(
        self,
        books: List[BookRecord],
        pages_scraped: int,
        start_time: float,
        failed_pages: List[int],
    ) -> RunResult:
        """Build the RunResult, write it and report the run totals."""
        result = self.sink.finalize(books, pages_scraped, start_time, failed_pages)
        self.sink.write_run(result)

        logger.info(
            f"{Colors.bold(Colors.green('[✔]'))} "
            f"{Colors.green(f'Scraped {result.total_books} books ({result.detailed_books} with details) from {result.pages_scraped} pages')}"
        )
        if result.failed_pages:
            logger.info(f"{Colors.yellow('[!]')} Failed pages: {', '.join(str(n) for n in result.failed_pages)}")
        logger.info(Colors.blue(f"[%] Total execution time: {result.duration_seconds:.2f} seconds"))
        return result
