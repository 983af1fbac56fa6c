"""
Static HTML page driver using httpx.

Fetches pages without a browser, so nothing rendered by JavaScript is seen.
Useful for server-rendered offer pages, for quick checks and, with an
httpx.MockTransport, for exercising the pipeline against fixture HTML.
"""

import asyncio
import logging
from typing import Dict, Optional

import httpx
from bs4 import BeautifulSoup

from .page import BasePage, ElementInfo, NavigationError, element_info

logger = logging.getLogger(__name__)


class StaticPage(BasePage):
    """
    Page driver backed by a reusable httpx.AsyncClient.

    Error status pages (404, 503) are kept as the current document rather
    than raised, because their titles are what tells the pipeline the
    product is missing. Only transport failures raise NavigationError.
    """

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the static page.

        Args:
            headers: Custom HTTP headers
            transport: Optional httpx transport (e.g., MockTransport in tests)
        """
        self.headers = headers or {
            'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36',
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
            'Accept-Encoding': 'gzip, deflate',
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._url = ''
        self._html = ''
        self._soup: Optional[BeautifulSoup] = None
        self.status_code: Optional[int] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create reusable HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                headers=self.headers,
                transport=self._transport,
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=10,
                    keepalive_expiry=30.0
                )
            )
        return self._client

    async def navigate(self, url: str, timeout: float, wait_until: str = 'load') -> None:
        logger.debug(f"StaticPage fetching: {url}")
        client = await self._get_client()
        try:
            response = await client.get(url, timeout=timeout)
        except httpx.HTTPError as e:
            raise NavigationError(f"Failed to load {url}: {e}") from e

        if response.status_code >= 400:
            logger.debug(f"Got status {response.status_code} for {url}, keeping error page")

        self.status_code = response.status_code
        self._url = str(response.url)
        self._html = response.text
        self._soup = None

    def _document(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self._html, 'html.parser')
        return self._soup

    async def url(self) -> str:
        return self._url

    async def title(self) -> str:
        title = self._document().title
        return title.get_text().strip() if title else ''

    async def query(self, selector: str) -> Optional[ElementInfo]:
        tag = self._document().select_one(selector)
        return element_info(tag) if tag is not None else None

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        # Nothing renders after load, so the answer cannot change by waiting
        await asyncio.sleep(0)
        return await self.query(selector) is not None

    async def content(self) -> str:
        return self._html

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
