"""
Record types shared by the crawl pipeline.

This module defines the data structures passed between the scrapers,
the orchestrator and the output sink, plus the terminal color helpers
used for status lines.
"""

from typing import List, Dict, Optional, Any, Union
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    # Colors
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def blue(text):
        return f"{Colors.BLUE}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class StockStatus(Enum):
    """Availability flag shown on a catalogue list entry."""
    IN_STOCK = "InStock"
    OUT_OF_STOCK = "OutOfStock"


@dataclass
class LoadedDocument:
    """A successfully navigated page and its rendered HTML."""
    url: str  # final URL, after any redirects
    html: str
    status: Optional[int] = None
    title: Optional[str] = None


@dataclass
class FetchFailure:
    """Failure value returned in place of a record. Never raised."""
    message: str
    url: str
    timestamp: str = field(default_factory=utc_timestamp)

    error = True

    def to_dict(self) -> Dict:
        return {
            'error': True,
            'message': self.message,
            'url': self.url,
            'timestamp': self.timestamp,
        }


@dataclass
class SummaryRecord:
    """One catalogue entry as listed on a list page."""
    title: str
    price: str
    stock: StockStatus
    rate: str
    link: str
    thumbnail: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            'title': self.title,
            'price': self.price,
            'stock': self.stock.value,
            'rate': self.rate,
            'link': self.link,
            'thumbnail': self.thumbnail,
        }


@dataclass
class StockInfo:
    """Availability details parsed from a detail page."""
    in_stock: bool
    quantity: str
    availability: str

    def to_dict(self) -> Dict:
        return {
            'inStock': self.in_stock,
            'quantity': self.quantity,
            'availability': self.availability,
        }


@dataclass
class DetailRecord:
    """Full record for one item, scraped from its detail page."""
    thumbnail: Optional[str]
    title: str
    price: str
    stock_info: StockInfo
    rate: str
    category: str
    product_info: Dict[str, str] = field(default_factory=dict)
    description: str = 'No description available'
    scraped_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict:
        return {
            'thumbnail': self.thumbnail,
            'title': self.title,
            'price': self.price,
            'stockInfo': self.stock_info.to_dict(),
            'rate': self.rate,
            'category': self.category,
            'productInfo': dict(self.product_info),
            'description': self.description,
            'scrapedAt': self.scraped_at,
        }


@dataclass
class MergedRecord:
    """A list entry joined with its detail page."""
    book_title: str
    book_link: str
    book_details: DetailRecord

    def to_dict(self) -> Dict:
        return {
            'bookTitle': self.book_title,
            'bookLink': self.book_link,
            'bookDetails': self.book_details.to_dict(),
        }


# A degraded record is the bare summary, marked by the absence of bookDetails
BookRecord = Union[MergedRecord, SummaryRecord]


@dataclass
class RunResult:
    """Combined output of one crawl run."""
    pages_scraped: int = 0
    books: List[BookRecord] = field(default_factory=list)
    failed_pages: List[int] = field(default_factory=list)
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0.0

    @property
    def total_books(self) -> int:
        return len(self.books)

    @property
    def detailed_books(self) -> int:
        return sum(1 for book in self.books if isinstance(book, MergedRecord))

    def to_dict(self) -> Dict[str, Any]:
        completed_at = self.completed_at or datetime.now(timezone.utc)
        return {
            'metadata': {
                'totalBooks': self.total_books,
                'pagesScraped': self.pages_scraped,
                'scrapedAt': utc_timestamp(completed_at),
                'durationSeconds': round(self.duration_seconds, 2),
                'failedPages': list(self.failed_pages),
            },
            'books': [book.to_dict() for book in self.books],
        }


def is_failure(value: Any) -> bool:
    """True when a scraper returned a FetchFailure instead of a record."""
    return isinstance(value, FetchFailure)
