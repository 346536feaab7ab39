"""
JSON output for crawl runs.

Writes one file per successfully detailed book while the crawl runs,
and one combined file with run metadata when it finishes. Write errors
are logged and reported through the return value, never raised.
"""

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
import logging

from .base import BookRecord, DetailRecord, RunResult, Colors
from .utils.urls import slugify

logger = logging.getLogger(__name__)


def run_file_timestamp(moment: Optional[datetime] = None) -> str:
    """Filesystem-safe UTC timestamp: ISO-8601 to the second, colons replaced by '-'."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime('%Y-%m-%dT%H-%M-%S')


class JsonSink:
    """
    Persists records under ``output_dir``.

    Layout:
        <output_dir>/books_<timestamp>.json   combined RunResult
        <output_dir>/books/<slug>.json        one DetailRecord per book

    Directories are created on first write only, so a run that never
    succeeds leaves no trace on disk.
    """

    def __init__(self, output_dir: Path = Path('data')):
        self.output_dir = Path(output_dir)

    @property
    def books_dir(self) -> Path:
        return self.output_dir / 'books'

    def _write_json(self, path: Path, payload) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        return path

    def write_detail(self, title: str, details: DetailRecord) -> Path:
        """
        Write a single book's detail record.

        Raises on I/O errors; the orchestrator treats that like any other
        failure while processing the item.
        """
        return self._write_json(self.books_dir / f"{slugify(title)}.json", details.to_dict())

    def finalize(
        self,
        books: List[BookRecord],
        pages_scraped: int,
        start_time: float,
        failed_pages: Optional[List[int]] = None,
    ) -> RunResult:
        """
        Build the RunResult for a finished run.

        Args:
            books: Collected records in page-then-item order
            pages_scraped: Number of list pages processed successfully
            start_time: ``time.monotonic()`` value taken when the run started
            failed_pages: Page numbers whose list scrape failed
        """
        completed_at = datetime.now(timezone.utc)
        return RunResult(
            pages_scraped=pages_scraped,
            books=list(books),
            failed_pages=list(failed_pages or []),
            completed_at=completed_at,
            duration_seconds=time.monotonic() - start_time,
        )

    def write_run(self, result: RunResult) -> Optional[Path]:
        """
        Write the combined result file.

        Returns:
            Path written, or None when there was nothing to write or the
            write failed.
        """
        if not result.books:
            logger.warning(f"{Colors.bold(Colors.yellow('[!]'))} {Colors.yellow('No books were scraped, skipping file creation')}")
            return None

        filename = self.output_dir / f"books_{run_file_timestamp(result.completed_at)}.json"
        try:
            self._write_json(filename, result.to_dict())
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"{Colors.red('[X]')} Failed to save results: {e}")
            return None

        logger.info(f"{Colors.green('[✔]')} Results saved to {filename}")
        return filename
