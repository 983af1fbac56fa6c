"""
Stealth page driver for storefronts with bot detection.

Uses Playwright Chromium with launch flags, a realistic context and an init
script that hide the usual automation indicators. Images, fonts and
analytics requests are blocked to keep navigations fast.

Anti-bot challenges are not solved here: the discovery code detects the
challenge page and skips the unit.
"""

import asyncio
import logging
import os
from typing import Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Route,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from .page import BasePage, BrowserStartError, ElementInfo, NavigationError, PageError

logger = logging.getLogger(__name__)


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36'
)

# Requests aborted before they leave the browser
BLOCKED_RESOURCE_PATTERNS = (
    '**/*.{png,jpg,jpeg,gif,svg,ico,woff,woff2,ttf,eot}',
    '**/doubleclick.net/**',
    '**/google-analytics.com/**',
    '**/googletagmanager.com/**',
)

STEALTH_INIT_SCRIPT = """
    Object.defineProperty(navigator, 'webdriver', {
        get: () => undefined
    });

    // Override plugins
    Object.defineProperty(navigator, 'plugins', {
        get: () => [1, 2, 3, 4, 5]
    });

    // Override languages
    Object.defineProperty(navigator, 'languages', {
        get: () => ['en-US', 'en']
    });
"""


class StealthPage(BasePage):
    """
    Page driver owning one Playwright browser, context and tab.

    The browser starts lazily on first navigation (or on entering the async
    context manager) and the same tab is reused for every navigation, so the
    pipeline stays strictly sequential.
    """

    def __init__(
        self,
        headless: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        locale: str = 'en-US',
        viewport_width: int = 1366,
        viewport_height: int = 768,
    ):
        """
        Initialize the stealth page.

        Args:
            headless: Run browser in headless mode
            user_agent: User-Agent for the browser context
            locale: Browser locale; profile labels are parsed in English
            viewport_width: Viewport width in pixels
            viewport_height: Viewport height in pixels
        """
        self.headless = headless
        self.user_agent = user_agent
        self.locale = locale
        self.viewport = {'width': viewport_width, 'height': viewport_height}
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def _init_browser(self):
        """Start Playwright, launch Chromium and open the working tab."""
        if self._page is not None:
            return

        try:
            self._playwright = await async_playwright().start()

            chromium_path = self._playwright.chromium.executable_path
            if not chromium_path or not os.path.exists(chromium_path):
                raise BrowserStartError("Chromium browser not found. Run: playwright install chromium")

            logger.debug("Launching Chromium browser...")
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=[
                    '--no-sandbox',
                    '--disable-setuid-sandbox',
                    '--disable-dev-shm-usage',
                    '--disable-blink-features=AutomationControlled',
                ],
            )

            self._context = await self._browser.new_context(
                user_agent=self.user_agent,
                viewport=self.viewport,
                locale=self.locale,
                extra_http_headers={
                    'Accept-Language': 'en-US,en;q=0.9',
                },
            )
            await self._context.add_init_script(STEALTH_INIT_SCRIPT)

            self._page = await self._context.new_page()
            for pattern in BLOCKED_RESOURCE_PATTERNS:
                await self._page.route(pattern, self._abort_route)

            logger.debug("Browser initialization successful")

        except Exception as e:
            logger.error(f"Failed to initialize browser: {e}")
            await self._cleanup()
            if isinstance(e, BrowserStartError):
                raise
            raise BrowserStartError(f"Failed to initialize browser: {e}") from e

    @staticmethod
    async def _abort_route(route: Route):
        await route.abort()

    async def _cleanup(self):
        """Clean up browser resources with timeouts to prevent hanging."""
        cleanup_timeout = 2.0

        for name, closer in (
            ('page', self._page.close if self._page else None),
            ('context', self._context.close if self._context else None),
            ('browser', self._browser.close if self._browser else None),
            ('playwright', self._playwright.stop if self._playwright else None),
        ):
            if closer is None:
                continue
            try:
                await asyncio.wait_for(closer(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Closing {name} timed out, forcing cleanup")
            except PlaywrightError as e:
                logger.warning(f"Error closing {name}: {e}")

        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None

    def _require_page(self) -> Page:
        if self._page is None:
            raise PageError("Browser page is not open")
        return self._page

    async def navigate(self, url: str, timeout: float, wait_until: str = 'load') -> None:
        await self._init_browser()
        page = self._require_page()
        try:
            await page.goto(url, wait_until=wait_until, timeout=int(timeout * 1000))
        except PlaywrightTimeoutError as e:
            raise NavigationError(f"Timed out after {timeout}s loading {url}") from e
        except PlaywrightError as e:
            raise NavigationError(f"Failed to load {url}: {e}") from e

    async def url(self) -> str:
        return self._require_page().url

    async def title(self) -> str:
        try:
            return await self._require_page().title()
        except PlaywrightError as e:
            raise PageError(f"Could not read page title: {e}") from e

    async def query(self, selector: str) -> Optional[ElementInfo]:
        page = self._require_page()
        try:
            handle = await page.query_selector(selector)
            if handle is None:
                return None
            text = await handle.text_content() or ''
            attributes = await handle.evaluate(
                "el => Object.fromEntries(Array.from(el.attributes).map(a => [a.name, a.value]))"
            )
        except PlaywrightError as e:
            raise PageError(f"Query {selector!r} failed: {e}") from e
        return ElementInfo(text=text.strip(), attributes=attributes or {})

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        page = self._require_page()
        try:
            await page.wait_for_selector(selector, timeout=int(timeout * 1000))
            return True
        except PlaywrightTimeoutError:
            return False
        except PlaywrightError as e:
            raise PageError(f"Waiting for {selector!r} failed: {e}") from e

    async def content(self) -> str:
        try:
            return await self._require_page().content()
        except PlaywrightError as e:
            raise PageError(f"Could not read page content: {e}") from e

    async def close(self):
        """Close the browser and cleanup resources."""
        await self._cleanup()

    async def __aenter__(self):
        await self._init_browser()
        return self
