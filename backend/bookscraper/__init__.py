"""
Crawler for the books.toscrape.com catalogue.

Walks the paginated list pages, scrapes each book's detail page and
writes the merged records to JSON.
"""

from .base import (
    FetchFailure,
    LoadedDocument,
    SummaryRecord,
    DetailRecord,
    MergedRecord,
    RunResult,
    StockStatus,
)
from .orchestrator import CrawlOrchestrator
from .sink import JsonSink

__version__ = "1.0.0"

__all__ = [
    'FetchFailure',
    'LoadedDocument',
    'SummaryRecord',
    'DetailRecord',
    'MergedRecord',
    'RunResult',
    'StockStatus',
    'CrawlOrchestrator',
    'JsonSink',
]
