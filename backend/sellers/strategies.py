"""
Seller discovery strategies for offer-listing pages.

Each strategy is a pure function (soup, base_url, selectors) -> references.
They are run in priority order and their results accumulated, because one
layout can expose some sellers through storefront links and others only
through a "Sold by" label. Deduplication happens once, after all strategies.
"""

from typing import Callable, Dict, Iterable, Iterator, List, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from .base import SellerReference
from .identity import normalize_seller_key
from .selectors import DEFAULT_SELECTORS, SOLD_BY_LABELS, SELLER_LINK_MARKERS, SelectorCatalog
from .utils.extractors import extract_seller_id, extract_seller_id_from_path, resolve_href
from .utils.normalizers import normalize_text


STRATEGY_STOREFRONT = 'aag'
STRATEGY_SELLER_PARAM = 'sellerParam'
STRATEGY_SOLD_BY = 'soldBy'
STRATEGY_SOLD_BY_PATH = 'soldByPath'

StrategyFn = Callable[[BeautifulSoup, str, SelectorCatalog], List[SellerReference]]


def _select_all(soup: BeautifulSoup, selectors: Iterable[str]) -> Iterator[Tag]:
    for selector in selectors:
        yield from soup.select(selector)


def _anchor_text(anchor: Tag) -> str:
    return normalize_text(anchor.get_text())


def _links_with_seller_id(
    soup: BeautifulSoup,
    base_url: str,
    selectors: Iterable[str],
    strategy: str,
) -> List[SellerReference]:
    found = []
    for anchor in _select_all(soup, selectors):
        href = resolve_href(anchor.get('href'), base_url)
        seller_id = extract_seller_id(href)
        name = _anchor_text(anchor)
        if seller_id and name:
            found.append(SellerReference(
                display_text=name,
                seller_id=seller_id,
                source_url=href,
                discovery_strategy=strategy,
            ))
    return found


def find_storefront_links(
    soup: BeautifulSoup,
    base_url: str,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
) -> List[SellerReference]:
    """Strategy a: links to the seller storefront route (/gp/aag/main)."""
    return _links_with_seller_id(soup, base_url, selectors.storefront_link, STRATEGY_STOREFRONT)


def find_seller_param_links(
    soup: BeautifulSoup,
    base_url: str,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
) -> List[SellerReference]:
    """Strategy b: any link carrying a seller= query parameter (/sp?seller=...)."""
    return _links_with_seller_id(soup, base_url, selectors.seller_param_link, STRATEGY_SELLER_PARAM)


def _has_sold_by_label(anchor: Tag) -> bool:
    """True if the anchor is preceded or wrapped by a "Sold by" label."""
    previous = anchor.previous_sibling
    if isinstance(previous, Tag):
        previous_text = previous.get_text()
    else:
        previous_text = str(previous) if previous is not None else ''
    parent_text = anchor.parent.get_text() if anchor.parent is not None else ''

    previous_text = previous_text.lower()
    parent_text = parent_text.lower()
    return any(label in previous_text or label in parent_text for label in SOLD_BY_LABELS)


def find_sold_by_links(
    soup: BeautifulSoup,
    base_url: str,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
) -> List[SellerReference]:
    """
    Strategy c: text proximity.

    Any anchor right after (or inside an element reading) "Sold by". The id
    comes from the query string when present, otherwise from a seller/ID
    path segment on /sp links.
    """
    found = []
    for anchor in soup.find_all('a'):
        raw_href = anchor.get('href') or ''
        href = resolve_href(raw_href, base_url)
        # Fragment links ("#", "#reviews") are page widgets, not sellers
        if not href or '#' in raw_href:
            continue
        if not _has_sold_by_label(anchor):
            continue
        name = _anchor_text(anchor)
        if not name:
            continue

        seller_id = extract_seller_id(href)
        strategy = STRATEGY_SOLD_BY
        if not seller_id and '/sp' in href:
            seller_id = extract_seller_id_from_path(href)
            strategy = STRATEGY_SOLD_BY_PATH
        if seller_id:
            found.append(SellerReference(
                display_text=name,
                seller_id=seller_id,
                source_url=href,
                discovery_strategy=strategy,
            ))
    return found


# Priority order: earlier strategies win when the same seller is found twice
DISCOVERY_STRATEGIES: List[Tuple[str, StrategyFn]] = [
    (STRATEGY_STOREFRONT, find_storefront_links),
    (STRATEGY_SELLER_PARAM, find_seller_param_links),
    (STRATEGY_SOLD_BY, find_sold_by_links),
]


def run_strategies(
    soup: BeautifulSoup,
    base_url: str,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
    strategies: Iterable[Tuple[str, StrategyFn]] = DISCOVERY_STRATEGIES,
) -> List[SellerReference]:
    """Run every strategy in order and accumulate all candidates (not deduplicated)."""
    candidates: List[SellerReference] = []
    for _, strategy in strategies:
        candidates.extend(strategy(soup, base_url, selectors))
    return candidates


def dedupe_by_seller_id(candidates: Iterable[SellerReference]) -> List[SellerReference]:
    """Keep the first reference per seller id, preserving encounter order."""
    unique: Dict[str, SellerReference] = {}
    for candidate in candidates:
        key = normalize_seller_key(candidate.seller_id)
        if key not in unique:
            unique[key] = candidate
    return list(unique.values())


def collect_page_diagnostics(
    soup: BeautifulSoup,
    base_url: str,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
) -> Dict:
    """
    Snapshot of seller-related markup on an offer page, for logs only.

    Reports link counts, a sample of seller-like links and which known
    layout regions are present.
    """
    anchors = soup.find_all('a')
    seller_links = []
    for anchor in anchors:
        href = resolve_href(anchor.get('href'), base_url)
        if any(marker in href for marker in SELLER_LINK_MARKERS):
            seller_links.append((anchor, href))

    def has_any(region: Iterable[str]) -> bool:
        return any(soup.select_one(selector) is not None for selector in region)

    return {
        'total_links': len(anchors),
        'seller_link_count': len(seller_links),
        'seller_link_samples': [
            {'text': _anchor_text(anchor)[:50], 'href': href[:150]}
            for anchor, href in seller_links[:10]
        ],
        'has_offer_list': has_any(selectors.offer_list),
        'has_offer_item': has_any(selectors.offer_item),
        'has_primary_seller_link': has_any(selectors.primary_seller_link),
        'has_merchant_info': has_any(selectors.merchant_info),
        'has_other_sellers_ingress': has_any(selectors.other_sellers_ingress),
        'sold_by_labels': sum(
            1 for el in soup.find_all(True)
            if not el.find(True) and normalize_text(el.get_text()).lower() in SOLD_BY_LABELS
        ),
    }
