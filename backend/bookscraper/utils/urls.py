"""
URL and filename helpers.

List pages link to items relative to the catalogue directory, and detail
pages reference thumbnails with ``../../..`` prefixes. Everything leaving
the scrapers must be absolute.
"""

import re
from urllib.parse import urljoin, urlparse

PARENT_SEGMENTS = re.compile(r'^(\.\./)+')
SLUG_PATTERN = re.compile(r'[^A-Za-z0-9]')


def has_scheme(url: str) -> bool:
    """True when ``url`` is already absolute (``http://``, ``https://`` ...)."""
    return bool(urlparse(url).scheme)


def resolve_url(maybe_relative: str, base: str) -> str:
    """
    Resolve a possibly-relative URL against ``base``.

    Absolute input is returned unchanged. Relative input is joined with
    standard URL-join semantics, so query strings and fragments survive.

    Examples:
        ("a-light-in-the-attic_1000/index.html", "https://books.toscrape.com/catalogue/")
            -> "https://books.toscrape.com/catalogue/a-light-in-the-attic_1000/index.html"
        ("https://example.com/x", anything) -> "https://example.com/x"
    """
    if has_scheme(maybe_relative):
        return maybe_relative
    return urljoin(base, maybe_relative)


def resolve_thumbnail(path: str, base: str) -> str:
    """
    Resolve a detail-page image path against the site root.

    Detail pages sit three levels deep, so image paths look like
    ``../../media/cache/fe/72/fe72aea293c7a1ea4d4b9e5d6a5dda07.jpg``.
    The leading parent segments are dropped before joining.
    """
    if has_scheme(path):
        return path
    return resolve_url(PARENT_SEGMENTS.sub('', path), base)


def slugify(title: str) -> str:
    """Filesystem-safe name: every non-alphanumeric character becomes '_', lowercased."""
    return SLUG_PATTERN.sub('_', title).lower()
