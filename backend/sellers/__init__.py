"""
Marketplace seller discovery and business-information extraction.

This package provides:
- Offer discovery across several offer-listing layouts
- Seller profile parsing (ratings, detailed business information)
- A sequential orchestrator with cross-marketplace deduplication
"""

from .base import (
    Marketplace,
    ProductMarketplaceTarget,
    SellerReference,
    SellerProfile,
    SellerRecord,
    RunOptions,
    RunContext,
    RunSummary,
)
from .config import MARKETPLACES, get_marketplace, get_marketplaces
from .discovery import OfferDiscovery
from .identity import is_first_party_seller, normalize_seller_key
from .profile import SellerProfileExtractor
from .manager import MarketplaceOrchestrator

__all__ = [
    'Marketplace',
    'ProductMarketplaceTarget',
    'SellerReference',
    'SellerProfile',
    'SellerRecord',
    'RunOptions',
    'RunContext',
    'RunSummary',
    'MARKETPLACES',
    'get_marketplace',
    'get_marketplaces',
    'OfferDiscovery',
    'is_first_party_seller',
    'normalize_seller_key',
    'SellerProfileExtractor',
    'MarketplaceOrchestrator',
]
