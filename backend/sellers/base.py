"""
Data structures shared by the seller discovery pipeline.

Everything here is immutable once built: discovery produces SellerReference
objects, the profile extractor produces SellerProfile objects and the
orchestrator merges both into SellerRecord objects for the output sinks.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Marketplace:
    """One regional storefront of the platform."""
    code: str        # Short locale tag (e.g., 'UK')
    domain: str      # Storefront hostname without www (e.g., 'amazon.co.uk')
    currency: str
    tld: str

    @property
    def base_url(self) -> str:
        return f"https://www.{self.domain}"

    def offer_listing_url(self, product_id: str) -> str:
        """URL of the offer-listing surface for a product (NEW condition only)."""
        return f"{self.base_url}/gp/offer-listing/{product_id}/ref=dp_olp_NEW_mbc?condition=NEW"

    def seller_profile_url(self, seller_id: str, product_id: str) -> str:
        """Canonical seller profile URL, built from ids rather than a scraped href."""
        return f"{self.base_url}/sp?seller={seller_id}&asin={product_id}"


@dataclass(frozen=True)
class ProductMarketplaceTarget:
    """One unit of work: a product on a marketplace."""
    product_id: str
    marketplace: Marketplace

    @property
    def label(self) -> str:
        return f"{self.product_id}@{self.marketplace.code}"


@dataclass(frozen=True)
class SellerReference:
    """A seller found on the offer-listing surface."""
    display_text: str
    seller_id: str
    source_url: str
    discovery_strategy: str


@dataclass(frozen=True)
class SellerProfile:
    """Data parsed from a seller's profile page. Every field may be absent."""
    seller_display_name: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    trade_register_number: Optional[str] = None
    vat_number: Optional[str] = None
    phone_number: Optional[str] = None
    customer_service_phone: Optional[str] = None
    email: Optional[str] = None
    business_address: Optional[str] = None
    customer_service_address: Optional[str] = None
    rating: Optional[float] = None
    positive_percent: Optional[int] = None
    rating_count: Optional[int] = None
    has_detailed_info: bool = False

    # Set only when the page could not be loaded or parsed
    error: Optional[str] = None


@dataclass(frozen=True)
class SellerRecord:
    """Output unit: one seller seen for one product on one marketplace."""
    product_id: str
    marketplace: str
    marketplace_domain: str
    seller_id: str
    seller_name: str
    seller_display_name: str
    source_url: str
    discovery_strategy: str
    profile_url: str

    # Business details
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    trade_register_number: Optional[str] = None
    vat_number: Optional[str] = None
    phone_number: Optional[str] = None
    customer_service_phone: Optional[str] = None
    email: Optional[str] = None
    business_address: Optional[str] = None
    customer_service_address: Optional[str] = None

    # Ratings
    rating: Optional[float] = None
    positive_percent: Optional[int] = None
    rating_count: Optional[int] = None
    has_detailed_info: bool = False

    # Provenance
    first_seen_on_marketplace: Optional[str] = None
    is_duplicate: bool = False
    captured_at: datetime = field(default_factory=utc_now)
    profile_error: Optional[str] = None

    @classmethod
    def build(
        cls,
        target: ProductMarketplaceTarget,
        reference: SellerReference,
        profile: SellerProfile,
        profile_url: str,
        first_seen_on_marketplace: str,
        is_duplicate: bool,
        captured_at: Optional[datetime] = None,
    ) -> 'SellerRecord':
        """Merge a discovered reference and its profile into a record."""
        return cls(
            product_id=target.product_id,
            marketplace=target.marketplace.code,
            marketplace_domain=target.marketplace.domain,
            seller_id=reference.seller_id,
            seller_name=reference.display_text,
            seller_display_name=profile.seller_display_name or reference.display_text,
            source_url=reference.source_url,
            discovery_strategy=reference.discovery_strategy,
            profile_url=profile_url,
            business_name=profile.business_name,
            business_type=profile.business_type,
            trade_register_number=profile.trade_register_number,
            vat_number=profile.vat_number,
            phone_number=profile.phone_number,
            customer_service_phone=profile.customer_service_phone,
            email=profile.email,
            business_address=profile.business_address,
            customer_service_address=profile.customer_service_address,
            rating=profile.rating,
            positive_percent=profile.positive_percent,
            rating_count=profile.rating_count,
            has_detailed_info=profile.has_detailed_info,
            first_seen_on_marketplace=first_seen_on_marketplace,
            is_duplicate=is_duplicate,
            captured_at=captured_at or utc_now(),
            profile_error=profile.error,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['captured_at'] = self.captured_at.isoformat()
        return data


@dataclass(frozen=True)
class RunOptions:
    """Per-run behaviour switches for the orchestrator."""
    skip_first_party_sellers: bool = True
    delay_between_requests: float = 3.0  # Seconds


@dataclass
class RunContext:
    """
    Mutable state scoped to one run.

    sellers_seen maps seller_id -> code of the marketplace it was first seen on.
    It is the single source of truth for duplicate provenance.
    """
    sellers_seen: Dict[str, str] = field(default_factory=dict)
    records: List[SellerRecord] = field(default_factory=list)
    errors: List[Dict] = field(default_factory=list)


@dataclass
class RunSummary:
    """Human-facing totals for a finished run."""
    started_at: datetime
    completed_at: Optional[datetime] = None
    total_records: int = 0
    unique_sellers: int = 0
    products_processed: int = 0
    marketplaces_checked: int = 0
    records_with_phone: int = 0
    records_with_email: int = 0
    errors: int = 0

    @classmethod
    def from_context(
        cls,
        context: RunContext,
        products_processed: int,
        marketplaces_checked: int,
        started_at: datetime,
        first_record: int = 0,
        first_error: int = 0,
    ) -> 'RunSummary':
        """
        Totals for one run over context.

        Only records and errors from index first_record / first_error on are
        counted, so a context shared by several runs gives per-run totals.
        """
        records = context.records[first_record:]
        return cls(
            started_at=started_at,
            completed_at=utc_now(),
            total_records=len(records),
            unique_sellers=len({r.seller_id for r in records}),
            products_processed=products_processed,
            marketplaces_checked=marketplaces_checked,
            records_with_phone=sum(1 for r in records if r.phone_number),
            records_with_email=sum(1 for r in records if r.email),
            errors=len(context.errors) - first_error,
        )

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict:
        return {
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
            'total_records': self.total_records,
            'unique_sellers': self.unique_sellers,
            'products_processed': self.products_processed,
            'marketplaces_checked': self.marketplaces_checked,
            'records_with_phone': self.records_with_phone,
            'records_with_email': self.records_with_email,
            'errors': self.errors,
        }
