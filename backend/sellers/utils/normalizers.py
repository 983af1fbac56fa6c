"""
Data normalization utilities for seller data.

These functions standardize scraped text into consistent formats.
"""

import re
from typing import Optional


def normalize_text(text: Optional[str]) -> str:
    """
    Collapse runs of whitespace (including non-breaking spaces) and trim.

    Examples:
        '  Acme\\n  Trading  Ltd ' -> 'Acme Trading Ltd'
        None -> ''
    """
    if not text:
        return ''
    return re.sub(r'\s+', ' ', text.replace('\xa0', ' ')).strip()


def normalize_label(label: str) -> str:
    """
    Normalize a "label: value" label for lookup.

    Examples:
        ' Business Name ' -> 'business name'
        'VAT  Number' -> 'vat number'
    """
    return normalize_text(label).lower()


def normalize_seller_name(name: Optional[str]) -> str:
    """Lowercase and trim a seller display name for comparison."""
    if not name:
        return ''
    return name.strip().lower()


def parse_count(text: Optional[str]) -> Optional[int]:
    """
    Parse an integer that may carry thousands separators.

    Examples:
        '1,234' -> 1234
        '87' -> 87
        'n/a' -> None
    """
    if not text:
        return None
    digits = text.replace(',', '').strip()
    try:
        return int(digits)
    except ValueError:
        return None


def parse_decimal(text: Optional[str]) -> Optional[float]:
    """
    Parse a decimal rating value.

    Only the leading number is used, so trailing punctuation is ignored.

    Examples:
        '4.7' -> 4.7
        '4.7.' -> 4.7
        '5' -> 5.0
        '.' -> None
    """
    if not text:
        return None
    match = re.match(r'\d+(?:\.\d+)?|\.\d+', text.strip())
    if not match:
        return None
    return float(match.group(0))
