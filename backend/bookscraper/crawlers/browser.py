"""
Playwright browser crawler.

Owns the Playwright driver, one Chromium instance and the browsing
contexts opened on it. Every context blocks non-essential subresources
(images, stylesheets, fonts, media) so pages reach network idle quickly.
"""

import asyncio
from typing import List, Optional
from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Route
import logging

logger = logging.getLogger(__name__)

DEFAULT_BLOCKED_RESOURCES = ('image', 'stylesheet', 'font', 'media')


class BrowserCrawler:
    """
    Chromium wrapper used as an async context manager.

    Usage:
        async with BrowserCrawler(user_agent=...) as crawler:
            page = await crawler.new_page()
            ...
            await crawler.close_page(page)

    Leaving the ``async with`` block closes every open context, the
    browser and the driver, whether the block exits normally or raises.
    """

    def __init__(
        self,
        headless: bool = True,
        user_agent: Optional[str] = None,
        blocked_resource_types=DEFAULT_BLOCKED_RESOURCES,
    ):
        """
        Initialize the browser crawler.

        Args:
            headless: Run browser in headless mode
            user_agent: User agent sent by every context
            blocked_resource_types: Playwright resource types aborted by the interception policy
        """
        self.headless = headless
        self.user_agent = user_agent
        self.blocked_resource_types = frozenset(blocked_resource_types)
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def _block_resources(self, route: Route):
        """Abort non-essential subresources, let everything else through."""
        if route.request.resource_type in self.blocked_resource_types:
            await route.abort()
        else:
            await route.continue_()

    async def start(self):
        """Start Playwright and launch Chromium."""
        if self._browser is not None:
            return
        self._playwright = await async_playwright().start()
        try:
            logger.debug("Launching Chromium browser...")
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=[
                    '--no-sandbox',
                    '--disable-setuid-sandbox',
                    '--disable-dev-shm-usage',
                    '--disable-accelerated-2d-canvas',
                ],
            )
        except Exception as e:
            logger.error(f"Failed to launch browser: {e}")
            await self.close()
            raise

    async def new_page(self) -> Page:
        """
        Open a fresh browsing context and return its single page.

        The interception policy is installed once on the context, so it
        applies to every navigation made through the page.
        """
        if self._browser is None:
            await self.start()
        context = await self._browser.new_context(user_agent=self.user_agent)
        self._contexts.append(context)
        await context.route('**/*', self._block_resources)
        return await context.new_page()

    async def close_page(self, page: Page):
        """Close a page together with the context it was opened in."""
        context = page.context
        try:
            await context.close()
        finally:
            if context in self._contexts:
                self._contexts.remove(context)

    async def close(self):
        """Close all contexts, the browser and the driver."""
        cleanup_timeout = 5.0

        for context in list(self._contexts):
            try:
                await asyncio.wait_for(context.close(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Context close timed out, forcing cleanup")
            except Exception as e:
                logger.debug(f"Error closing context: {e}")
        self._contexts = []

        if self._browser:
            try:
                await asyncio.wait_for(self._browser.close(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Browser close timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await asyncio.wait_for(self._playwright.stop(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Playwright stop timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
