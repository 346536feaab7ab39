"""Shared utilities for the scrapers."""

from .urls import (
    resolve_url,
    resolve_thumbnail,
    slugify,
)
from .extractors import (
    parse_document,
    extract_summaries,
    extract_detail,
)

__all__ = [
    'resolve_url',
    'resolve_thumbnail',
    'slugify',
    'parse_document',
    'extract_summaries',
    'extract_detail',
]
