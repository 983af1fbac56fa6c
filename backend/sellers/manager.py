"""
Marketplace Orchestrator - drives discovery and profile extraction.

Runs every product on every marketplace strictly in order, so the "first
seen on" provenance of a seller is reproducible: the first marketplace (in
the given order) a seller is found on owns it, later sightings are marked
as duplicates. Nothing is retried; a failed unit yields no records and the
run moves on.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from .base import (
    Colors,
    Marketplace,
    ProductMarketplaceTarget,
    RunContext,
    RunOptions,
    RunSummary,
    SellerRecord,
    SellerReference,
    utc_now,
)
from .crawlers.page import BrowserStartError
from .discovery import OfferDiscovery
from .identity import is_first_party_seller, normalize_seller_key
from .profile import SellerProfileExtractor

logger = logging.getLogger(__name__)


class RecordSink(Protocol):
    """Append-only destination for records as they are produced."""

    def append(self, record: SellerRecord) -> None:
        ...


class MarketplaceOrchestrator:
    """
    Runs the seller pipeline over products x marketplaces.

    Usage:
        orchestrator = MarketplaceOrchestrator(discovery, extractor, sink)
        records = await orchestrator.run(['B07YDVWL4J'], get_marketplaces(['UK', 'DE']))
        summary = orchestrator.summary
    """

    def __init__(
        self,
        discovery: OfferDiscovery,
        extractor: SellerProfileExtractor,
        sink: Optional[RecordSink] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            discovery: Offer discovery engine
            extractor: Seller profile extractor
            sink: Optional output sink receiving every record immediately
            sleep: Pacing coroutine (asyncio.sleep; replaceable in tests)
        """
        self.discovery = discovery
        self.extractor = extractor
        self.sink = sink
        self._sleep = sleep
        self.summary: Optional[RunSummary] = None

    async def run(
        self,
        product_ids: Sequence[str],
        marketplaces: Sequence[Marketplace],
        options: Optional[RunOptions] = None,
        context: Optional[RunContext] = None,
    ) -> List[SellerRecord]:
        """
        Scrape every product on every marketplace, in the given order.

        Args:
            product_ids: Product identifiers (ASINs)
            marketplaces: Marketplaces in processing order
            options: Run options (defaults to RunOptions())
            context: Run state; a fresh one is created when omitted

        Returns:
            All records emitted during this run, in emission order
        """
        options = options or RunOptions()
        context = context if context is not None else RunContext()
        started_at = utc_now()
        first_record = len(context.records)
        first_error = len(context.errors)

        for product_id in product_ids:
            logger.info(f"\n{'=' * 60}")
            logger.info(f"Processing product: {Colors.bold(product_id)}")
            logger.info(f"{'=' * 60}")

            for marketplace in marketplaces:
                logger.info(Colors.cyan(f"--- {marketplace.code} ({marketplace.domain}) ---"))
                target = ProductMarketplaceTarget(product_id=product_id, marketplace=marketplace)
                try:
                    await self.scrape_target(target, options, context)
                except BrowserStartError:
                    # No later unit can succeed without a browser
                    raise
                except Exception as e:
                    logger.error(f"[{marketplace.code}] Unexpected error for product {product_id}: {e}")
                    context.errors.append({'target': target.label, 'error': str(e)})

                # Delay between marketplace switches
                await self._sleep(options.delay_between_requests)

        self.summary = RunSummary.from_context(
            context,
            products_processed=len(product_ids),
            marketplaces_checked=len(marketplaces),
            started_at=started_at,
            first_record=first_record,
            first_error=first_error,
        )
        return context.records[first_record:]

    async def scrape_target(
        self,
        target: ProductMarketplaceTarget,
        options: RunOptions,
        context: RunContext,
    ) -> List[SellerRecord]:
        """Discover, filter and profile the sellers of one product on one marketplace."""
        code = target.marketplace.code
        sellers = await self.discovery.discover_sellers(target.product_id, target.marketplace)

        if options.skip_first_party_sellers:
            sellers = self.filter_first_party(sellers, code)

        if not sellers:
            logger.info(f"[{code}] No third-party sellers to visit")
            return []

        logger.info(f"[{code}] Visiting {len(sellers)} seller profile(s)...")

        records = []
        for seller in sellers:
            await self._sleep(options.delay_between_requests)
            record = await self._profile_seller(target, seller, context)
            self._emit(record, context)
            records.append(record)
        return records

    @staticmethod
    def filter_first_party(sellers: List[SellerReference], code: str) -> List[SellerReference]:
        kept = []
        for seller in sellers:
            if is_first_party_seller(seller.display_text):
                logger.info(f"[{code}] Skipping first-party seller: {seller.display_text}")
                continue
            kept.append(seller)
        return kept

    async def _profile_seller(
        self,
        target: ProductMarketplaceTarget,
        seller: SellerReference,
        context: RunContext,
    ) -> SellerRecord:
        code = target.marketplace.code
        profile_url = target.marketplace.seller_profile_url(seller.seller_id, target.product_id)
        profile = await self.extractor.extract_profile(profile_url)

        # Provenance is decided here, once per seller, before the record exists
        key = normalize_seller_key(seller.seller_id)
        first_seen = context.sellers_seen.get(key)
        if first_seen is None:
            context.sellers_seen[key] = code
            first_seen, is_duplicate = code, False
        else:
            is_duplicate = True
            logger.info(f"    {Colors.gray(f'[DUP] {seller.seller_id} first seen on {first_seen}')}")

        return SellerRecord.build(
            target=target,
            reference=seller,
            profile=profile,
            profile_url=profile_url,
            first_seen_on_marketplace=first_seen,
            is_duplicate=is_duplicate,
        )

    def _emit(self, record: SellerRecord, context: RunContext) -> None:
        """Record in the context, then the sink. A sink failure is logged and the run goes on."""
        context.records.append(record)
        if self.sink is None:
            return
        try:
            self.sink.append(record)
        except Exception as e:
            logger.error(f"[{record.marketplace}] {Colors.red('Could not store record')} for {record.seller_id}: {e}")
            context.errors.append({
                'target': f"{record.product_id}@{record.marketplace}",
                'seller_id': record.seller_id,
                'error': str(e),
            })
