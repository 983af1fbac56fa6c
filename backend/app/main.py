#!/usr/bin/env python3
"""
Marketplace seller scraper - command-line entry point.

Usage:
    cd backend
    python -m app.main [options]

Examples:
    python -m app.main --asin B07YDVWL4J                      # All marketplaces
    python -m app.main --asin B07YDVWL4J -m UK -m DE          # UK and DE only
    python -m app.main --asin B07YDVWL4J --include-first-party
    python -m app.main --list-marketplaces
"""

import argparse
import asyncio
import logging
import re
import sys
from typing import List, Optional

from app.config import Settings, settings as default_settings
from app.database import create_session_factory
from app.sinks import DatabaseSink, JsonLinesSink, MultiSink
from sellers.base import Colors, RunSummary
from sellers.config import list_marketplaces
from sellers.crawlers import BasePage, BrowserStartError, StaticPage, StealthPage
from sellers.discovery import OfferDiscovery
from sellers.manager import MarketplaceOrchestrator
from sellers.profile import SellerProfileExtractor

logger = logging.getLogger(__name__)


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


def setup_logging(settings: Settings) -> None:
    """Color console output, plain text in the log file."""
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    file_handler.setFormatter(ColorStripFormatter(settings.log_format))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(settings.log_format))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        handlers=[file_handler, console_handler],
        force=True  # Override any existing configuration
    )


def create_page(settings: Settings) -> BasePage:
    """Build the page driver selected in settings."""
    if settings.driver == 'stealth':
        return StealthPage(headless=settings.headless, user_agent=settings.user_agent)
    if settings.driver == 'static':
        return StaticPage()
    raise ValueError(f"Unknown driver: '{settings.driver}'. Valid drivers: stealth, static")


def create_sink(settings: Settings) -> MultiSink:
    sinks = []
    if settings.output_file:
        sinks.append(JsonLinesSink(settings.output_file))
    if settings.database_url:
        session_factory = create_session_factory(settings.database_url)
        sinks.append(DatabaseSink(session_factory()))
    return MultiSink(sinks)


def log_summary(summary: RunSummary) -> None:
    logger.info(f"\n{'=' * 60}")
    logger.info(Colors.bold('SCRAPING COMPLETE'))
    logger.info(f"{'=' * 60}")
    logger.info(f"Total seller records: {Colors.green(summary.total_records)}")
    logger.info(f"Unique sellers: {summary.unique_sellers}")
    logger.info(f"Products processed: {summary.products_processed}")
    logger.info(f"Marketplaces checked: {summary.marketplaces_checked}")
    logger.info(f"Records with phone: {summary.records_with_phone}")
    logger.info(f"Records with email: {summary.records_with_email}")
    if summary.errors:
        logger.info(f"Errors: {Colors.red(summary.errors)}")
    if summary.duration_seconds is not None:
        logger.info(f"Duration: {summary.duration_seconds:.1f}s")


async def run_scraper(settings: Settings) -> Optional[RunSummary]:
    """Build the pipeline from settings, run it and return the summary."""
    products = settings.products_to_process()
    marketplaces = settings.marketplaces_to_scrape()
    options = settings.run_options()

    logger.info(Colors.bold('=== Marketplace Seller Scraper ==='))
    logger.info(f"Products to process: {len(products)}")
    logger.info(f"Marketplaces: {', '.join(m.code for m in marketplaces)}")
    logger.info(f"Delay between requests: {options.delay_between_requests}s")
    logger.info(f"Skip first-party sellers: {options.skip_first_party_sellers}")

    page = create_page(settings)
    sink = create_sink(settings)
    try:
        # Entering the page starts the browser once, before any unit of work
        async with page:
            orchestrator = MarketplaceOrchestrator(
                discovery=OfferDiscovery(
                    page,
                    navigation_timeout=settings.offer_navigation_timeout,
                    selector_timeout=settings.selector_timeout,
                    fallback_delay=settings.offer_fallback_delay,
                ),
                extractor=SellerProfileExtractor(
                    page,
                    navigation_timeout=settings.profile_navigation_timeout,
                    settle_delay=settings.profile_settle_delay,
                ),
                sink=sink,
            )
            await orchestrator.run(products, marketplaces, options)
    finally:
        sink.close()

    log_summary(orchestrator.summary)
    return orchestrator.summary


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Collect marketplace sellers and their business details')
    parser.add_argument('--asin', action='append', dest='product_ids', help='Product id to process (repeatable)')
    parser.add_argument('--max-products', type=int, help='Process at most this many products (0 = all)')
    parser.add_argument('-m', '--marketplace', action='append', dest='marketplaces',
                        help='Marketplace code to include (repeatable, default: all)')
    parser.add_argument('--delay', type=float, dest='delay_between_requests',
                        help='Seconds to wait between requests')
    parser.add_argument('--include-first-party', action='store_true',
                        help='Keep records for the platform operator itself')
    parser.add_argument('--driver', choices=['stealth', 'static'], help='Page driver')
    parser.add_argument('--headful', action='store_true', help='Show the browser window')
    parser.add_argument('--output', dest='output_file', help='JSON lines output file')
    parser.add_argument('--database-url', help='SQLAlchemy URL to also store records in')
    parser.add_argument('--list-marketplaces', action='store_true', help='List marketplaces and exit')
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace, base: Settings = default_settings) -> Settings:
    """Overlay command-line flags on the environment settings."""
    overrides = {
        key: getattr(args, key)
        for key in ('product_ids', 'max_products', 'marketplaces', 'delay_between_requests',
                    'driver', 'output_file', 'database_url')
        if getattr(args, key) is not None
    }
    if args.include_first_party:
        overrides['skip_first_party_sellers'] = False
    if args.headful:
        overrides['headless'] = False
    return base.model_copy(update=overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if args.list_marketplaces:
        print("\nConfigured marketplaces:\n")
        for m in list_marketplaces():
            print(f"  {m['code']:<4} {m['domain']:<16} {m['currency']}")
        return 0

    settings = settings_from_args(args)
    setup_logging(settings)

    try:
        asyncio.run(run_scraper(settings))
    except ValueError as e:
        logger.error(str(e))
        return 2
    except BrowserStartError as e:
        logger.error(Colors.red(f"Browser could not start: {e}"))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
