"""
Page fetching with failure values instead of exceptions.

``fetch_page`` navigates a page (Playwright or static) to a URL and
returns either a LoadedDocument or a FetchFailure. Nothing raised during
navigation escapes this module.
"""

import asyncio
from dataclasses import dataclass
from typing import Union
import logging

from ..base import LoadedDocument, FetchFailure

logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """
    How many times a failed navigation is attempted.

    The default is a single attempt, i.e. no retry. With retries enabled,
    the wait before attempt ``n`` (1-based, n >= 2) is
    ``backoff_seconds * backoff_factor ** (n - 2)``.
    """
    max_attempts: int = 1
    backoff_seconds: float = 0.0
    backoff_factor: float = 2.0

    def delay_before(self, attempt: int) -> float:
        if attempt <= 1:
            return 0.0
        return self.backoff_seconds * self.backoff_factor ** (attempt - 2)


NO_RETRY = RetryPolicy()


async def _navigate(page, url: str, timeout_ms: int, wait_until: str) -> Union[LoadedDocument, FetchFailure]:
    try:
        response = await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    except Exception as e:
        return FetchFailure(message=f"Navigation failed: {e}", url=url)

    if response is None or not response.ok:
        status = response.status if response is not None else 'unknown'
        return FetchFailure(message=f"Failed to load page: HTTP status {status}", url=url)

    try:
        html = await page.content()
        title = await page.title()
    except Exception as e:
        return FetchFailure(message=f"Failed to read page content: {e}", url=url)

    return LoadedDocument(url=page.url, html=html, status=response.status, title=title)


async def fetch_page(
    page,
    url: str,
    timeout_ms: int = 5000,
    wait_until: str = 'networkidle',
    retry_policy: RetryPolicy = NO_RETRY,
) -> Union[LoadedDocument, FetchFailure]:
    """
    Navigate ``page`` to ``url`` and return the loaded document.

    A missing response, a non-2xx status, a timeout or any other
    navigation error produces a FetchFailure. The failure message
    includes the HTTP status when one was received.

    Args:
        page: Playwright page, or any object with the same goto/content/title surface
        url: Absolute URL to load
        timeout_ms: Navigation timeout in milliseconds
        wait_until: Load state to wait for ('networkidle' waits for quiescence)
        retry_policy: Attempts and backoff for failed navigations

    Returns:
        LoadedDocument or FetchFailure
    """
    attempts = max(1, retry_policy.max_attempts)
    result = None

    for attempt in range(1, attempts + 1):
        delay = retry_policy.delay_before(attempt)
        if delay > 0:
            await asyncio.sleep(delay)

        result = await _navigate(page, url, timeout_ms, wait_until)
        if isinstance(result, LoadedDocument):
            if attempt > 1:
                logger.info(f"Loaded {url} on attempt {attempt}/{attempts}")
            return result

        if attempt < attempts:
            logger.warning(f"Attempt {attempt}/{attempts} failed for {url}: {result.message}")

    return result
