"""
Static HTML crawler backed by httpx.

The catalogue is server-rendered, so the pipeline can run without a
browser. StaticCrawler hands out pages exposing the same navigation
surface the fetcher uses on a Playwright page: ``goto``, ``content``,
``title``, ``url`` and ``close``.
"""

from typing import Optional, Dict
from bs4 import BeautifulSoup
import httpx
import logging

logger = logging.getLogger(__name__)


class StaticResponse:
    """Navigation response with the attributes of a Playwright Response."""

    def __init__(self, response: httpx.Response):
        self.status = response.status_code
        self.ok = response.is_success
        self.url = str(response.url)


class StaticPage:
    """One navigable 'tab' sharing the crawler's HTTP client."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client
        self._html = ''
        self.url = 'about:blank'
        self.closed = False

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None):
        """
        Fetch ``url``. ``wait_until`` is accepted for interface parity and ignored.

        Args:
            url: URL to fetch
            wait_until: Ignored, there are no subresources to wait for
            timeout: Timeout in milliseconds

        Returns:
            StaticResponse

        Raises:
            httpx.HTTPError: On transport failure or timeout
        """
        logger.debug(f"StaticCrawler fetching: {url}")
        kwargs = {}
        if timeout is not None:
            kwargs['timeout'] = timeout / 1000
        response = await self._client.get(url, **kwargs)
        self._html = response.text
        self.url = str(response.url)
        return StaticResponse(response)

    async def content(self) -> str:
        return self._html

    async def title(self) -> str:
        title = BeautifulSoup(self._html, 'html.parser').title
        return title.get_text().strip() if title else ''

    async def close(self):
        self.closed = True


class StaticCrawler:
    """
    Wrapper for fetching static HTML pages.

    Uses one pooled httpx.AsyncClient for every page it hands out.
    Used as an async context manager, like BrowserCrawler.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the static crawler.

        Args:
            timeout: Default request timeout in seconds
            headers: Custom HTTP headers
            transport: Optional httpx transport (mock transports in tests)
        """
        self.timeout = timeout
        self.headers = headers or {
            'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36',
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
        }
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create reusable HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                headers=self.headers,
                transport=self.transport,
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=10,
                    keepalive_expiry=30.0
                )
            )
        return self._client

    async def new_page(self) -> StaticPage:
        return StaticPage(await self._get_client())

    async def close_page(self, page: StaticPage):
        await page.close()

    async def close(self):
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
