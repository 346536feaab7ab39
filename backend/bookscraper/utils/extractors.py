"""
Field extraction for catalogue list pages and item detail pages.

Every field read is independent: a missing element yields a sentinel
value instead of failing the whole record.
"""

import re
from typing import Optional, List, Dict
from bs4 import BeautifulSoup, Tag

from ..base import (
    LoadedDocument,
    SummaryRecord,
    DetailRecord,
    StockInfo,
    StockStatus,
)

UNKNOWN_TITLE = 'Unknown Title'
UNKNOWN_PRICE = 'Unknown Price'
NO_RATING = 'No Rating'
UNKNOWN_CATEGORY = 'Unknown Category'
NO_DESCRIPTION = 'No description available'
OUT_OF_STOCK = 'Out of Stock'

IN_STOCK_MARKER = 'In stock'
NON_DIGITS = re.compile(r'\D')


def parse_document(document: LoadedDocument) -> BeautifulSoup:
    """Parse a loaded document's HTML."""
    return BeautifulSoup(document.html, 'html.parser')


def _text(element: Optional[Tag], default: str) -> str:
    if element is None:
        return default
    return element.get_text().strip()


def extract_rating(element: Optional[Tag]) -> str:
    """
    Extract the star rating word from a ``star-rating`` element.

    The rating is carried as a second class token, e.g.
    ``<p class="star-rating Three">`` -> ``"Three"``.
    """
    if element is None:
        return NO_RATING
    for token in element.get('class') or []:
        if token != 'star-rating':
            return token
    return NO_RATING


def extract_stock_info(availability: str) -> StockInfo:
    """
    Split an availability string into stock flag and quantity.

    Examples:
        "In stock (22 available)" -> in_stock=True, quantity="22"
        "Out of stock"            -> in_stock=False, quantity="Out of Stock"
    """
    in_stock = IN_STOCK_MARKER in availability
    quantity = NON_DIGITS.sub('', availability) if in_stock else OUT_OF_STOCK
    return StockInfo(in_stock=in_stock, quantity=quantity, availability=availability)


def _extract_summary(entry: Tag) -> SummaryRecord:
    title_link = entry.select_one('h3 a')
    price = entry.select_one('.price_color')
    stock = entry.select_one('.instock.availability')
    thumbnail = entry.select_one('div a img')

    if title_link is not None:
        title = title_link.get('title') or title_link.get_text(strip=True) or UNKNOWN_TITLE
        link = title_link.get('href', '')
    else:
        title = UNKNOWN_TITLE
        link = ''

    return SummaryRecord(
        title=title,
        price=_text(price, UNKNOWN_PRICE),
        stock=StockStatus.IN_STOCK if stock is not None else StockStatus.OUT_OF_STOCK,
        rate=extract_rating(entry.select_one('.star-rating')),
        link=link,
        thumbnail=thumbnail.get('src') if thumbnail is not None else None,
    )


def extract_summaries(soup: BeautifulSoup) -> List[SummaryRecord]:
    """
    Extract every catalogue entry on a list page.

    Args:
        soup: Parsed list page

    Returns:
        One SummaryRecord per ``.product_pod`` element, links still as found.
        An empty list when the page has no entries.
    """
    return [_extract_summary(entry) for entry in soup.select('.product_pod')]


def extract_product_info(soup: BeautifulSoup) -> Dict[str, str]:
    """Key/value attributes from the product table. Rows lacking a th or td are skipped."""
    info = {}
    for row in soup.select('table.table-striped tr'):
        header = row.find('th')
        cell = row.find('td')
        if header is not None and cell is not None:
            info[header.get_text().strip()] = cell.get_text().strip()
    return info


def extract_detail(soup: BeautifulSoup) -> DetailRecord:
    """
    Extract the full record from an item detail page.

    The thumbnail is returned exactly as found (relative); the caller
    resolves it against the site root.

    Args:
        soup: Parsed detail page

    Returns:
        DetailRecord with sentinels for any missing element
    """
    thumbnail = soup.select_one('.item.active img')
    availability = _text(soup.select_one('.instock.availability'), '')

    return DetailRecord(
        thumbnail=thumbnail.get('src') if thumbnail is not None else None,
        title=_text(soup.select_one('.product_main h1'), UNKNOWN_TITLE),
        price=_text(soup.select_one('.product_main .price_color')
                    or soup.select_one('.price_color'), UNKNOWN_PRICE),
        stock_info=extract_stock_info(availability),
        rate=extract_rating(soup.select_one('.star-rating')),
        category=_text(soup.select_one('.breadcrumb li:nth-child(3) a'), UNKNOWN_CATEGORY),
        product_info=extract_product_info(soup),
        description=_text(soup.select_one('#product_description + p'), NO_DESCRIPTION),
    )
