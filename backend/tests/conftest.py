"""
Pytest configuration and fixtures for the book crawler tests.

The browser boundary is replaced by small fake pages that answer
``goto``/``content``/``title`` from a dict of canned responses, so the
whole pipeline runs without Chromium or network access.
"""

import pytest

from bookscraper.config import Settings
from bookscraper.scraper import ScrapeOptions


BASE_URL = "https://books.toscrape.com/"
CATALOGUE_URL = BASE_URL + "catalogue/"


def page_url(n):
    return f"{CATALOGUE_URL}page-{n}.html"


def list_entry(slug, title, price="£51.77", rating="Three", in_stock=True, thumbnail=True):
    """HTML for one ``article.product_pod`` as rendered on a list page."""
    rating_html = f'<p class="star-rating {rating}"><i class="icon-star"></i></p>' if rating else ''
    stock_html = (
        '<p class="instock availability"><i class="icon-ok"></i> In stock</p>'
        if in_stock else '<p class="availability">Out of stock</p>'
    )
    image_html = (
        f'<img src="../media/cache/2c/da/{slug}.jpg" alt="{title}" class="thumbnail">'
        if thumbnail else ''
    )
    return f"""
    <li class="col-xs-6 col-sm-4 col-md-3 col-lg-3">
      <article class="product_pod">
        <div class="image_container">
          <a href="{slug}/index.html">{image_html}</a>
        </div>
        {rating_html}
        <h3><a href="{slug}/index.html" title="{title}">{title[:20]}...</a></h3>
        <div class="product_price">
          <p class="price_color">{price}</p>
          {stock_html}
        </div>
      </article>
    </li>
    """


def list_page(entries):
    return f"""<!DOCTYPE html>
<html lang="en-us">
<head><title>All products | Books to Scrape - Sandbox</title></head>
<body>
  <div class="page_inner">
    <section>
      <ol class="row">
        {''.join(entries)}
      </ol>
    </section>
  </div>
</body>
</html>
"""


def detail_page(
    title,
    price="£51.77",
    availability="In stock (22 available)",
    rating="Three",
    category="Poetry",
    rows=None,
    description="It's hard to imagine a world without A Light in the Attic.",
):
    """HTML for a book detail page."""
    if rows is None:
        rows = [
            ("UPC", "a897fe39b1053632"),
            ("Product Type", "Books"),
            ("Price (excl. tax)", price),
            ("Availability", availability),
            ("Number of reviews", "0"),
        ]
    row_html = ''.join(f"<tr><th>{k}</th><td>{v}</td></tr>" for k, v in rows)
    description_html = (
        f'<div id="product_description" class="sub-header"><h2>Product Description</h2></div>\n<p>{description}</p>'
        if description is not None else ''
    )
    availability_class = "instock availability" if "In stock" in availability else "availability"
    return f"""<!DOCTYPE html>
<html lang="en-us">
<head><title>{title} | Books to Scrape - Sandbox</title></head>
<body>
  <ul class="breadcrumb">
    <li><a href="../../index.html">Home</a></li>
    <li><a href="../category/books_1/index.html">Books</a></li>
    <li><a href="../category/books/poetry_23/index.html">{category}</a></li>
    <li class="active">{title}</li>
  </ul>
  <article class="product_page">
    <div class="row">
      <div class="col-sm-6">
        <div id="product_gallery" class="carousel">
          <div class="thumbnail">
            <div class="carousel-inner">
              <div class="item active">
                <img src="../../media/cache/fe/72/fe72aea293c7a1ea4d4b9e5d6a5dda07.jpg" alt="{title}" />
              </div>
            </div>
          </div>
        </div>
      </div>
      <div class="col-sm-6 product_main">
        <h1>{title}</h1>
        <p class="price_color">{price}</p>
        <p class="{availability_class}">
          <i class="icon-ok"></i>
          {availability}
        </p>
        <p class="star-rating {rating}"><i class="icon-star"></i></p>
      </div>
    </div>
    {description_html}
    <div class="sub-header"><h2>Product Information</h2></div>
    <table class="table table-striped">{row_html}</table>
  </article>
</body>
</html>
"""


class FakeResponse:
    """Stands in for a Playwright Response."""

    def __init__(self, status):
        self.status = status
        self.ok = 200 <= status < 300


class FakePage:
    """
    Stands in for a Playwright Page.

    ``routes`` maps URL -> (status, html), or URL -> exception instance to
    raise from ``goto``, or URL -> None for a navigation with no response.
    Unknown URLs answer 404. ``redirects`` maps a requested URL to the
    URL the page ends up on.
    """

    def __init__(self, routes, name="page", redirects=None):
        self.routes = routes
        self.name = name
        self.redirects = redirects or {}
        self.visited = []
        self.closed = False
        self._html = ""
        self.url = "about:blank"

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        url = self.redirects.get(url, url)
        if url not in self.routes:
            self._html = "<html><body>Not found</body></html>"
            return FakeResponse(404)
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if route is None:
            return None
        status, html = route
        self._html = html
        self.url = url
        return FakeResponse(status)

    async def content(self):
        return self._html

    async def title(self):
        return "Books to Scrape"

    async def close(self):
        self.closed = True


class FakeCrawler:
    """Crawler double recording page lifecycle and context-manager use."""

    def __init__(self, routes, fail_on_enter=None):
        self.routes = routes
        self.fail_on_enter = fail_on_enter
        self.pages = []
        self.entered = False
        self.exited = False

    async def new_page(self):
        page = FakePage(self.routes, name=f"page-{len(self.pages)}")
        self.pages.append(page)
        return page

    async def close_page(self, page):
        await page.close()

    async def __aenter__(self):
        self.entered = True
        if self.fail_on_enter:
            raise self.fail_on_enter
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        for page in self.pages:
            page.closed = True
        self.exited = True


async def no_sleep(seconds):
    return None


@pytest.fixture
def options():
    """Scrape options pointing at the books sandbox with no retries."""
    return ScrapeOptions(base_url=BASE_URL, catalogue_url=CATALOGUE_URL)


@pytest.fixture
def crawl_settings(tmp_path):
    """Settings for a short crawl writing under a temporary directory."""
    return Settings(
        base_url=BASE_URL,
        max_pages=3,
        item_delay_seconds=0,
        page_delay_seconds=0,
        output_dir=tmp_path / "data",
    )
