"""
Seller profile extraction.

A profile page carries the display name, rating statistics and (on most
marketplaces) a "Detailed Seller Information" block with the legally
required business registration fields. The block's markup differs between
locales, but its rendered text reliably degrades to "Label: value" lines,
so parsing works on rendered lines rather than on fixed selectors.

Profile page structure:
- h1: seller display name
- "4.6 out of 5 stars", "92% positive", "(1,234 ratings)" anywhere in the text
- h3 "Detailed Seller Information" inside an a-box / a-column / section
- "Customer Service Phone" on marketplaces without the detailed block
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .base import Colors, SellerProfile
from .crawlers.page import BasePage, BrowserStartError
from .selectors import ADDRESS_TERMINATOR, DEFAULT_SELECTORS, DETAILED_INFO_HEADING, SelectorCatalog
from .utils.extractors import (
    extract_customer_service_phone,
    extract_positive_percent,
    extract_rating,
    extract_rating_count,
    page_text,
    text_lines,
)
from .utils.normalizers import normalize_label, normalize_text

logger = logging.getLogger(__name__)


# Single-line labels -> SellerProfile field
VALUE_FIELDS = {
    'business name': 'business_name',
    'business type': 'business_type',
    'trade register number': 'trade_register_number',
    'vat number': 'vat_number',
    'phone number': 'phone_number',
    'email': 'email',
}

# Labels whose value continues on the following lines
ADDRESS_FIELDS = {
    'business address': 'business_address',
    'customer services address': 'customer_service_address',
}


def _collect_continuation(lines: List[str]) -> List[str]:
    collected = []
    for line in lines:
        if ':' in line or ADDRESS_TERMINATOR in line.lower():
            break
        collected.append(line)
    return collected


def parse_business_lines(lines: List[str]) -> Dict[str, str]:
    """
    Parse the detailed information block's lines into profile fields.

    Each line is split on its first colon. Known labels copy their value
    verbatim; an address label with no value starts a multi-line address
    that runs until the next line with a colon or a "This seller..." line.
    A line without any colon is a label with an empty value.

    Example:
        ['Business Name: Acme Ltd', 'Business Address', '12 High Street',
         'London', 'VAT Number: GB123']
        -> {'business_name': 'Acme Ltd',
            'business_address': '12 High Street, London',
            'vat_number': 'GB123'}
    """
    fields: Dict[str, str] = {}
    for i, line in enumerate(lines):
        raw_key, _, raw_value = line.partition(':')
        key = normalize_label(raw_key)
        value = raw_value.strip()

        if value:
            field = VALUE_FIELDS.get(key)
            if field:
                fields[field] = value
        elif key in ADDRESS_FIELDS:
            address_lines = _collect_continuation(lines[i + 1:])
            if address_lines:
                fields[ADDRESS_FIELDS[key]] = ', '.join(address_lines)
    return fields


def find_detailed_info_heading(
    soup: BeautifulSoup,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
) -> Optional[Tag]:
    for selector in selectors.business_info_heading:
        for heading in soup.select(selector):
            if DETAILED_INFO_HEADING in heading.get_text():
                return heading
    return None


def find_detailed_info_container(
    heading: Tag,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
) -> Optional[Tag]:
    """Nearest ancestor with a known container shape, else the grandparent."""
    for parent in heading.parents:
        if isinstance(parent, BeautifulSoup):
            break
        if any(parent.css.match(selector) for selector in selectors.business_info_container):
            return parent
    if heading.parent is not None:
        return heading.parent.parent
    return None


def parse_profile_document(
    soup: BeautifulSoup,
    selectors: SelectorCatalog = DEFAULT_SELECTORS,
) -> SellerProfile:
    """Parse a rendered seller profile page. Missing sections leave fields as None."""
    fields: Dict = {}

    for selector in selectors.seller_name_heading:
        heading = soup.select_one(selector)
        if heading is not None:
            fields['seller_display_name'] = normalize_text(heading.get_text()) or None
            break

    text = page_text(soup)
    fields['rating'] = extract_rating(text)
    fields['positive_percent'] = extract_positive_percent(text)
    fields['rating_count'] = extract_rating_count(text)
    customer_service_phone = extract_customer_service_phone(text)

    detail_heading = find_detailed_info_heading(soup, selectors)
    if detail_heading is None:
        # Marketplaces such as AE only show a customer service phone
        fields['has_detailed_info'] = False
        if customer_service_phone:
            fields['phone_number'] = customer_service_phone
            fields['customer_service_phone'] = customer_service_phone
        return SellerProfile(**fields)

    fields['has_detailed_info'] = True
    container = find_detailed_info_container(detail_heading, selectors)
    if container is not None:
        fields.update(parse_business_lines(text_lines(container)))

    if customer_service_phone:
        fields['customer_service_phone'] = customer_service_phone
        # A phone number from the detailed block takes precedence
        if not fields.get('phone_number'):
            fields['phone_number'] = customer_service_phone

    return SellerProfile(**fields)


class SellerProfileExtractor:
    """Loads seller profile pages and parses them into SellerProfile objects."""

    def __init__(
        self,
        page: BasePage,
        selectors: SelectorCatalog = DEFAULT_SELECTORS,
        navigation_timeout: float = 30.0,
        settle_delay: float = 1.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.page = page
        self.selectors = selectors
        self.navigation_timeout = navigation_timeout
        self.settle_delay = settle_delay
        self._sleep = sleep

    async def extract_profile(self, profile_url: str) -> SellerProfile:
        """
        Load and parse one seller profile page.

        On any failure but BrowserStartError the returned profile only
        carries an error message, which callers treat as "no data available".
        """
        try:
            await self.page.navigate(
                profile_url,
                timeout=self.navigation_timeout,
                wait_until='domcontentloaded',
            )
            # Let asynchronously rendered sections settle
            await self._sleep(self.settle_delay)
            profile = await self.page.evaluate(
                lambda soup: parse_profile_document(soup, self.selectors)
            )
        except BrowserStartError:
            raise
        except Exception as e:
            logger.warning(f"    {Colors.red('Failed to extract seller info')}: {e}")
            return SellerProfile(error=str(e))

        if profile.seller_display_name:
            logger.info(
                f"    {profile.seller_display_name} | "
                f"Phone: {profile.phone_number or 'N/A'} | "
                f"Email: {profile.email or 'N/A'}"
            )
        return profile
