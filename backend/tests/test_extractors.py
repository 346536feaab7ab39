"""
Tests for list and detail field extraction.
"""

import pytest
from bs4 import BeautifulSoup

from bookscraper.base import StockStatus
from bookscraper.utils.extractors import (
    extract_summaries,
    extract_detail,
    extract_stock_info,
    extract_product_info,
    extract_rating,
)

from conftest import list_entry, list_page, detail_page


def soup(html):
    return BeautifulSoup(html, "html.parser")


class TestExtractSummaries:
    """Test list page extraction."""

    def test_empty_page_returns_empty_list(self):
        assert extract_summaries(soup(list_page([]))) == []

    def test_page_without_catalogue_markup(self):
        assert extract_summaries(soup("<html><body><p>Nothing here</p></body></html>")) == []

    def test_fields(self):
        html = list_page([list_entry("a-light-in-the-attic_1000", "A Light in the Attic", price="£51.77")])
        [book] = extract_summaries(soup(html))

        assert book.title == "A Light in the Attic"
        assert book.price == "£51.77"
        assert book.stock is StockStatus.IN_STOCK
        assert book.rate == "Three"
        assert book.link == "a-light-in-the-attic_1000/index.html"
        assert book.thumbnail == "../media/cache/2c/da/a-light-in-the-attic_1000.jpg"

    def test_missing_rating_uses_sentinel(self):
        html = list_page([
            list_entry("one_1", "One"),
            list_entry("two_2", "Two", rating=None),
        ])
        books = extract_summaries(soup(html))

        assert len(books) == 2
        assert books[0].rate == "Three"
        assert books[1].rate == "No Rating"

    def test_missing_elements_use_sentinels(self):
        html = list_page(['<article class="product_pod"></article>'])
        [book] = extract_summaries(soup(html))

        assert book.title == "Unknown Title"
        assert book.price == "Unknown Price"
        assert book.rate == "No Rating"
        assert book.thumbnail is None
        assert book.stock is StockStatus.OUT_OF_STOCK

    def test_out_of_stock_entry(self):
        html = list_page([list_entry("x_1", "X", in_stock=False, thumbnail=False)])
        [book] = extract_summaries(soup(html))

        assert book.stock is StockStatus.OUT_OF_STOCK
        assert book.thumbnail is None
        assert book.to_dict()["stock"] == "OutOfStock"


class TestExtractDetail:
    """Test detail page extraction."""

    def test_fields(self):
        details = extract_detail(soup(detail_page("A Light in the Attic")))

        assert details.title == "A Light in the Attic"
        assert details.price == "£51.77"
        assert details.stock_info.in_stock is True
        assert details.stock_info.quantity == "22"
        assert details.stock_info.availability == "In stock (22 available)"
        assert details.rate == "Three"
        assert details.category == "Poetry"
        assert details.description.startswith("It's hard to imagine")
        assert details.thumbnail == "../../media/cache/fe/72/fe72aea293c7a1ea4d4b9e5d6a5dda07.jpg"
        assert details.product_info["UPC"] == "a897fe39b1053632"
        assert details.scraped_at.endswith("Z")

    def test_out_of_stock(self):
        details = extract_detail(soup(detail_page("X", availability="Out of stock")))

        assert details.stock_info.in_stock is False
        assert details.stock_info.quantity == "Out of Stock"

    def test_missing_description(self):
        details = extract_detail(soup(detail_page("X", description=None)))
        assert details.description == "No description available"

    def test_empty_document_uses_sentinels(self):
        details = extract_detail(soup("<html><body></body></html>"))

        assert details.title == "Unknown Title"
        assert details.price == "Unknown Price"
        assert details.rate == "No Rating"
        assert details.category == "Unknown Category"
        assert details.thumbnail is None
        assert details.product_info == {}
        assert details.stock_info.in_stock is False
        assert details.stock_info.quantity == "Out of Stock"

    def test_to_dict_keys(self):
        data = extract_detail(soup(detail_page("X"))).to_dict()
        assert set(data) == {
            "thumbnail", "title", "price", "stockInfo", "rate",
            "category", "productInfo", "description", "scrapedAt",
        }
        assert set(data["stockInfo"]) == {"inStock", "quantity", "availability"}


class TestProductInfo:
    """Test product table parsing."""

    def test_only_complete_rows_count(self):
        html = """
        <table class="table table-striped">
          <tr><th>UPC</th><td>abc</td></tr>
          <tr><th>Tax</th><td>£0.00</td></tr>
          <tr><th>Header only</th></tr>
          <tr><td>Cell only</td></tr>
          <tr></tr>
        </table>
        """
        info = extract_product_info(soup(html))
        assert info == {"UPC": "abc", "Tax": "£0.00"}

    @pytest.mark.parametrize("n", [0, 1, 7])
    def test_entry_count_matches_rows(self, n):
        rows = [(f"Key {i}", f"Value {i}") for i in range(n)]
        details = extract_detail(soup(detail_page("X", rows=rows)))
        assert len(details.product_info) == n


class TestStockInfo:
    """Test availability parsing."""

    @pytest.mark.parametrize("text", ["Out of stock", "", "Available soon", "in stock (3 available)"])
    def test_without_in_stock_marker(self, text):
        info = extract_stock_info(text)
        assert info.in_stock is False
        assert info.quantity == "Out of Stock"

    def test_quantity_digits_only(self):
        assert extract_stock_info("In stock (19 available)").quantity == "19"


class TestRating:
    """Test star-rating class parsing."""

    def test_rating_word(self):
        assert extract_rating(soup('<p class="star-rating Five"></p>').p) == "Five"

    def test_no_rating_token(self):
        assert extract_rating(soup('<p class="star-rating"></p>').p) == "No Rating"

    def test_missing_element(self):
        assert extract_rating(None) == "No Rating"
