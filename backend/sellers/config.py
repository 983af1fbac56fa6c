"""
Marketplace configurations for every supported regional storefront.

Each marketplace has a Marketplace entry that defines:
- Storefront domain used to build offer-listing and seller profile URLs
- Currency and top-level domain (informational, carried into output)
"""

from typing import Dict, Iterable, List, Optional

from .base import Marketplace


# ============================================================
# MARKETPLACES
# Order matters: it is the default processing order, and the
# first marketplace a seller appears on wins "first seen" provenance
# ============================================================

MARKETPLACES: Dict[str, Marketplace] = {
    'UK': Marketplace(code='UK', domain='amazon.co.uk', currency='GBP', tld='co.uk'),
    'IE': Marketplace(code='IE', domain='amazon.ie', currency='EUR', tld='ie'),
    'DE': Marketplace(code='DE', domain='amazon.de', currency='EUR', tld='de'),
    'NL': Marketplace(code='NL', domain='amazon.nl', currency='EUR', tld='nl'),
    'SE': Marketplace(code='SE', domain='amazon.se', currency='SEK', tld='se'),
    'BE': Marketplace(code='BE', domain='amazon.com.be', currency='EUR', tld='com.be'),
    'PL': Marketplace(code='PL', domain='amazon.pl', currency='PLN', tld='pl'),
    'ES': Marketplace(code='ES', domain='amazon.es', currency='EUR', tld='es'),
    'IT': Marketplace(code='IT', domain='amazon.it', currency='EUR', tld='it'),
    'AE': Marketplace(code='AE', domain='amazon.ae', currency='AED', tld='ae'),
    'JP': Marketplace(code='JP', domain='amazon.co.jp', currency='JPY', tld='co.jp'),
    'SA': Marketplace(code='SA', domain='amazon.sa', currency='SAR', tld='sa'),
    'TR': Marketplace(code='TR', domain='amazon.com.tr', currency='TRY', tld='com.tr'),
}


# ============================================================
# FIRST-PARTY SELLER NAMES
# Lowercase. One entry per storefront plus generic legal-entity variants
# ============================================================

FIRST_PARTY_SELLER_NAMES = (
    'amazon',
    'amazon.co.uk',
    'amazon.de',
    'amazon.fr',
    'amazon.it',
    'amazon.es',
    'amazon.nl',
    'amazon.pl',
    'amazon.se',
    'amazon.com.be',
    'amazon.ie',
    'amazon.ae',
    'amazon.co.jp',
    'amazon.sa',
    'amazon.com.tr',
    'amazon uk',
    'amazon eu s.a.r.l.',
    'amazon eu',
    'amazon europe',
)


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_marketplace(code: str) -> Marketplace:
    """
    Get a marketplace by its code.

    Args:
        code: Marketplace code (e.g., 'UK', 'de'); case-insensitive

    Returns:
        Marketplace for the code

    Raises:
        ValueError: If code is not configured
    """
    key = (code or '').strip().upper()
    if key not in MARKETPLACES:
        valid_codes = ', '.join(MARKETPLACES.keys())
        raise ValueError(f"Unknown marketplace: '{code}'. Valid marketplaces: {valid_codes}")
    return MARKETPLACES[key]


def get_marketplaces(codes: Optional[Iterable[str]] = None) -> List[Marketplace]:
    """
    Get the marketplaces to scrape.

    An empty or missing selection means every configured marketplace.
    The configured table order is kept regardless of the selection order;
    unknown codes raise ValueError.
    """
    selected = [c.strip().upper() for c in (codes or []) if c and c.strip()]
    if not selected:
        return list(MARKETPLACES.values())
    for code in selected:
        get_marketplace(code)
    return [m for code, m in MARKETPLACES.items() if code in selected]


def list_marketplaces() -> List[Dict]:
    """Get a summary of all marketplaces for display."""
    return [
        {
            'code': m.code,
            'domain': m.domain,
            'currency': m.currency,
            'tld': m.tld,
        }
        for m in MARKETPLACES.values()
    ]
