"""
Seller identity helpers: first-party detection and dedup keys.
"""

from typing import Iterable, Optional

from .config import FIRST_PARTY_SELLER_NAMES
from .utils.normalizers import normalize_seller_name


def is_first_party_seller(
    name: Optional[str],
    known_names: Iterable[str] = FIRST_PARTY_SELLER_NAMES,
) -> bool:
    """
    Check if a seller name belongs to the platform operator itself.

    Matches by substring in either direction so that both abbreviated
    storefront names ("Amazon") and longer legal names
    ("Amazon EU S.a.r.l., UK Branch") are caught.

    An empty or missing name is unknown, not first-party.

    Examples:
        'Amazon.co.uk' -> True
        '  AMAZON EU S.A.R.L. ' -> True
        'Acme Trading Ltd' -> False
        '' -> False
    """
    normalized = normalize_seller_name(name)
    if not normalized:
        return False
    return any(
        known in normalized or normalized in known
        for known in known_names
    )


def normalize_seller_key(seller_id: str) -> str:
    """
    Dedup key for a seller.

    The platform-assigned id is used verbatim: two different ids are always
    two different sellers, even when their display names collide.
    """
    return seller_id
