"""
Data extraction utilities for offer-listing and seller profile pages.

These functions pull values out of rendered page text and link URLs using
regex patterns. All of them return None (or an empty value) when nothing
matches; a missing pattern is never an error.
"""

import re
from typing import List, Optional
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from .normalizers import parse_count, parse_decimal


# Elements that start and end a line in rendered text
BLOCK_TAGS = {
    'address', 'article', 'aside', 'blockquote', 'body', 'dd', 'div', 'dl',
    'dt', 'fieldset', 'figcaption', 'figure', 'footer', 'form', 'h1', 'h2',
    'h3', 'h4', 'h5', 'h6', 'header', 'hr', 'li', 'main', 'nav', 'ol', 'p',
    'pre', 'section', 'table', 'tbody', 'td', 'tfoot', 'th', 'thead', 'tr',
    'ul',
}

# Elements whose content is never rendered
SKIP_TAGS = {'script', 'style', 'noscript', 'template', 'head'}

_NON_TEXT_NODES = (Comment, CData, Declaration, Doctype, ProcessingInstruction)

SELLER_ID_PARAMS = ('seller', 'sellerID')

_SELLER_ID_QUERY_PATTERN = re.compile(r'seller=([A-Z0-9]+)', re.IGNORECASE)
_SELLER_ID_PATH_PATTERN = re.compile(r'seller[=/]([A-Z0-9]+)', re.IGNORECASE)

_RATING_PATTERN = re.compile(r'([\d.]+)\s*out of\s*5\s*stars')
_POSITIVE_PATTERN = re.compile(r'(\d+)%\s*positive')
_RATING_COUNT_PATTERN = re.compile(r'\((\d[\d,]*)\s*ratings?\)')
_CUSTOMER_SERVICE_PHONE_PATTERN = re.compile(r'Customer Service Phone[:\s]+([^\n]+)', re.IGNORECASE)


# ============================================================
# RENDERED TEXT
# ============================================================

def inner_text(node) -> str:
    """
    Approximate the browser's innerText for a parsed element.

    Block-level elements and <br> break lines, inline elements stay on the
    line they are in, whitespace is collapsed and empty lines are dropped.
    A "<span>Business Name:</span><span>Acme</span>" row therefore renders
    as the single line "Business Name:Acme".
    """
    if node is None:
        return ''
    parts: List[str] = []
    _collect_text(node, parts)
    lines = [re.sub(r'[ \t\r\f\v\xa0]+', ' ', line).strip() for line in ''.join(parts).split('\n')]
    return '\n'.join(line for line in lines if line)


def _collect_text(node, parts: List[str]) -> None:
    for child in node.children:
        if isinstance(child, _NON_TEXT_NODES):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child).replace('\n', ' '))
            continue
        if not isinstance(child, Tag) or child.name in SKIP_TAGS:
            continue
        if child.name == 'br':
            parts.append('\n')
            continue
        is_block = child.name in BLOCK_TAGS
        if is_block:
            parts.append('\n')
        _collect_text(child, parts)
        if is_block:
            parts.append('\n')


def text_lines(node) -> List[str]:
    """Rendered text of a node as an ordered list of non-empty lines."""
    text = inner_text(node)
    return text.split('\n') if text else []


def page_text(soup: BeautifulSoup) -> str:
    """Rendered text of the whole document body."""
    return inner_text(soup.body or soup)


# ============================================================
# SELLER IDS
# ============================================================

def resolve_href(href: Optional[str], base_url: str) -> str:
    """Resolve a raw href attribute against the page URL, like anchor.href does."""
    if not href:
        return ''
    return urljoin(base_url, href.strip())


def extract_seller_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the seller id from a URL's query string.

    Reads the "seller" parameter, then "sellerID". Falls back to a plain
    regex only when the URL cannot be parsed at all.

    Examples:
        https://www.amazon.de/gp/aag/main?seller=A1XYZ -> 'A1XYZ'
        /sp?ie=UTF8&sellerID=A2B3C -> 'A2B3C'
        /dp/B000 -> None
    """
    if not url:
        return None
    try:
        query = parse_qs(urlparse(url).query)
    except ValueError:
        match = _SELLER_ID_QUERY_PATTERN.search(url)
        return match.group(1) if match else None

    for param in SELLER_ID_PARAMS:
        values = query.get(param)
        if values and values[0].strip():
            return values[0].strip()
    return None


def extract_seller_id_from_path(url: Optional[str]) -> Optional[str]:
    """
    Extract a seller id written as "seller=ID" or "seller/ID" anywhere in a URL.

    Examples:
        https://www.amazon.se/sp/seller/A3QWE -> 'A3QWE'
    """
    if not url:
        return None
    match = _SELLER_ID_PATH_PATTERN.search(url)
    return match.group(1) if match else None


# ============================================================
# RATINGS & CONTACT
# ============================================================

def extract_rating(text: str) -> Optional[float]:
    """
    Extract the "X out of 5 stars" rating.

    Returns:
        Rating between 0 and 5, or None
    """
    match = _RATING_PATTERN.search(text or '')
    if not match:
        return None
    rating = parse_decimal(match.group(1))
    if rating is None or rating > 5:
        return None
    return rating


def extract_positive_percent(text: str) -> Optional[int]:
    """Extract the "NN% positive" feedback share (0-100)."""
    match = _POSITIVE_PATTERN.search(text or '')
    if not match:
        return None
    percent = int(match.group(1))
    return percent if percent <= 100 else None


def extract_rating_count(text: str) -> Optional[int]:
    """
    Extract a parenthesized rating count.

    Handles:
        (1,234 ratings)
        (1 rating)
    """
    match = _RATING_COUNT_PATTERN.search(text or '')
    if not match:
        return None
    return parse_count(match.group(1))


def extract_customer_service_phone(text: str) -> Optional[str]:
    """
    Extract the value after a "Customer Service Phone" label.

    The label may be followed by a colon or by whitespace (including a line
    break), as rendered on marketplaces without a detailed information block.
    """
    match = _CUSTOMER_SERVICE_PHONE_PATTERN.search(text or '')
    if not match:
        return None
    value = match.group(1).strip()
    return value or None
