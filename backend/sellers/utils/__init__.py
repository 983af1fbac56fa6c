"""Shared utilities for seller discovery and profile parsing."""

from .normalizers import (
    normalize_text,
    normalize_label,
    normalize_seller_name,
    parse_count,
    parse_decimal,
)
from .extractors import (
    inner_text,
    text_lines,
    page_text,
    resolve_href,
    extract_seller_id,
    extract_seller_id_from_path,
    extract_rating,
    extract_positive_percent,
    extract_rating_count,
    extract_customer_service_phone,
)

__all__ = [
    'normalize_text',
    'normalize_label',
    'normalize_seller_name',
    'parse_count',
    'parse_decimal',
    'inner_text',
    'text_lines',
    'page_text',
    'resolve_href',
    'extract_seller_id',
    'extract_seller_id_from_path',
    'extract_rating',
    'extract_positive_percent',
    'extract_rating_count',
    'extract_customer_service_phone',
]
