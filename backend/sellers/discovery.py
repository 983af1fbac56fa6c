"""
Offer discovery: every distinct seller offering a product on one marketplace.

Flow for one (product, marketplace):
  1. Load the offer-listing URL
  2. Bail out on not-found / error pages and on the bot challenge
  3. Wait for any known offer container (or a fixed fallback delay)
  4. Run the discovery strategies and deduplicate by seller id

Every failure ends in an empty list for this unit; nothing is raised and
nothing is retried.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List

from .base import Colors, Marketplace, SellerReference
from .crawlers.page import BasePage, PageError
from .selectors import (
    DEFAULT_SELECTORS,
    ERROR_URL_MARKERS,
    NOT_FOUND_TITLE_MARKERS,
    SelectorCatalog,
)
from .strategies import collect_page_diagnostics, dedupe_by_seller_id, run_strategies

logger = logging.getLogger(__name__)


def is_not_found_page(title: str, url: str) -> bool:
    """True for not-found, error and "Sorry" pages (by title or redirect URL)."""
    title = title or ''
    url = url or ''
    return (
        any(marker in title for marker in NOT_FOUND_TITLE_MARKERS)
        or any(marker in url for marker in ERROR_URL_MARKERS)
    )


class OfferDiscovery:
    """Finds the sellers listed on a product's offer-listing surface."""

    def __init__(
        self,
        page: BasePage,
        selectors: SelectorCatalog = DEFAULT_SELECTORS,
        navigation_timeout: float = 45.0,
        selector_timeout: float = 5.0,
        fallback_delay: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            page: Page driver shared with the rest of the pipeline
            selectors: Selector catalog
            navigation_timeout: Seconds allowed for loading the offer page
            selector_timeout: Seconds to wait for each offer container selector
            fallback_delay: Seconds to wait when no offer container shows up
            sleep: Delay coroutine (asyncio.sleep; replaceable in tests)
        """
        self.page = page
        self.selectors = selectors
        self.navigation_timeout = navigation_timeout
        self.selector_timeout = selector_timeout
        self.fallback_delay = fallback_delay
        self._sleep = sleep

    async def discover_sellers(self, product_id: str, marketplace: Marketplace) -> List[SellerReference]:
        """
        Return the distinct sellers offering product_id on marketplace.

        Navigation failures, missing products, bot challenges and unknown
        layouts all yield an empty list. Only BrowserStartError propagates.
        """
        code = marketplace.code
        offer_url = marketplace.offer_listing_url(product_id)
        logger.info(f"[{code}] Loading offers: {offer_url}")

        try:
            await self.page.navigate(offer_url, timeout=self.navigation_timeout, wait_until='load')
        except PageError as e:
            logger.warning(f"[{code}] Could not load offer page: {e}")
            return []

        try:
            current_url = await self.page.url()
            page_title = await self.page.title()
        except PageError as e:
            logger.warning(f"[{code}] Could not read offer page: {e}")
            return []

        logger.info(f"[{code}] Redirected to: {current_url}")
        logger.info(f"[{code}] Page title: {page_title}")

        if is_not_found_page(page_title, current_url):
            logger.info(f"[{code}] Product not found on this marketplace")
            return []

        try:
            if await self._has_captcha():
                logger.warning(f"[{code}] {Colors.yellow('CAPTCHA detected, skipping')}")
                return []
            await self._wait_for_offers(code)
        except PageError as e:
            logger.warning(f"[{code}] Offer page became unreadable: {e}")
            return []

        await self._log_diagnostics(code, current_url)

        try:
            candidates = await self.page.evaluate(
                lambda soup: run_strategies(soup, current_url, self.selectors)
            )
        except Exception as e:
            logger.warning(f"[{code}] Seller extraction failed: {e}")
            return []

        unique = dedupe_by_seller_id(candidates)
        summary = ', '.join(f"{s.display_text}({s.discovery_strategy})" for s in unique)
        logger.info(f"[{code}] Found {len(unique)} seller(s): {summary}")
        return unique

    async def _has_captcha(self) -> bool:
        for selector in self.selectors.captcha_form:
            if await self.page.query(selector) is not None:
                return True
        return False

    async def _wait_for_offers(self, code: str) -> None:
        """Wait for the first offer container that shows up, else sleep the fallback delay."""
        for selector in self.selectors.offer_containers:
            if await self.page.wait_for_selector(selector, timeout=self.selector_timeout):
                logger.info(f"[{code}] Found offers with selector: {selector}")
                return

        # Some layouts render sellers without a dedicated container
        logger.info(f"[{code}] No offer container found, waiting {self.fallback_delay}s as fallback...")
        await self._sleep(self.fallback_delay)

    async def _log_diagnostics(self, code: str, current_url: str) -> None:
        try:
            diagnostics = await self.page.evaluate(
                lambda soup: collect_page_diagnostics(soup, current_url, self.selectors)
            )
        except Exception as e:
            logger.debug(f"[{code}] Diagnostics unavailable: {e}")
            return
        logger.info(f"[{code}] Debug: {diagnostics}")
