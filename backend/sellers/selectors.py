"""
Selector catalog for offer-listing and seller profile pages.

Pure data: CSS locators grouped by the page region they address. Every role
holds a tuple of alternatives, tried in order, because the same region is
rendered differently depending on locale and layout experiment.

Bump CATALOG_VERSION whenever a locator is added, removed or reordered.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


CATALOG_VERSION = 3


# ============================================================
# LAYOUT VARIANTS
# Offer containers per known layout, in the order they are waited for
# ============================================================

LAYOUT_VARIANTS: Dict[str, Tuple[str, ...]] = {
    # All Offers Display overlay (loaded in the DOM for the offer-listing route)
    'aod': (
        '#aod-offer-list #aod-offer',
        '#aod-offer',
        '#all-offers-display',
    ),
    # Older standalone offer-listing page
    'olp': (
        '#olpOfferList',
        '.olpOffer',
    ),
    # Product page with offers inline
    'inline': (
        '#ppd',
    ),
}


def _offer_containers() -> Tuple[str, ...]:
    containers = []
    for selectors in LAYOUT_VARIANTS.values():
        containers.extend(selectors)
    return tuple(containers)


@dataclass(frozen=True)
class SelectorCatalog:
    """DOM locators by role."""

    # Product page
    primary_seller_link: Tuple[str, ...] = ('#sellerProfileTriggerId',)
    merchant_info: Tuple[str, ...] = ('#merchantInfoFeature_feature_div',)
    other_sellers_ingress: Tuple[str, ...] = ('#dynamic-aod-ingress-box', '#aod-ingress-link')

    # Offer-listing surface
    offer_containers: Tuple[str, ...] = _offer_containers()
    offer_list: Tuple[str, ...] = ('#aod-offer-list', '#olpOfferList')
    offer_item: Tuple[str, ...] = ('#aod-offer', '.olpOffer')
    storefront_link: Tuple[str, ...] = ('a[href*="/gp/aag/main"]',)
    seller_param_link: Tuple[str, ...] = ('a[href*="seller="]',)

    # Bot challenge
    captcha_form: Tuple[str, ...] = ('form[action*="validateCaptcha"]',)

    # Seller profile page
    seller_name_heading: Tuple[str, ...] = ('h1',)
    business_info_heading: Tuple[str, ...] = ('h3',)
    business_info_container: Tuple[str, ...] = (
        'div[class*="a-column"]',
        'div[class*="a-box"]',
        'section',
    )


DEFAULT_SELECTORS = SelectorCatalog()


# ============================================================
# TEXT MARKERS
# Matched against rendered text, not markup
# ============================================================

# Page title fragments that mean the product is not sold on this marketplace
NOT_FOUND_TITLE_MARKERS = ('Page Not Found', '404', 'Sorry')

# URL fragments of error pages we get redirected to
ERROR_URL_MARKERS = ('/errors/',)

# Label preceding (or wrapping) the seller link on an offer
SOLD_BY_LABELS = ('sold by',)

# Href fragments that identify seller-related links (diagnostics only)
SELLER_LINK_MARKERS = ('seller=', '/gp/aag/', '/sp?', '/seller/')

# Heading text of the business registration block on a profile page
DETAILED_INFO_HEADING = 'Detailed Seller Information'

# A line containing this ends a multi-line address value
ADDRESS_TERMINATOR = 'this seller'
