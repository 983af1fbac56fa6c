"""
Pytest configuration and fixtures for the seller scraper tests.

Pages are StaticPage instances over an httpx.MockTransport that serves the
HTML fixtures in tests/fixtures/, so the real driver, discovery and profile
code run end to end without network access.
"""

from pathlib import Path

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from sellers.base import ProductMarketplaceTarget, SellerProfile, SellerReference
from sellers.config import get_marketplace
from sellers.crawlers.page import BasePage, BrowserStartError
from sellers.crawlers.static import StaticPage

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Create an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Route value that makes the mock transport fail like a dropped connection
CONNECT_ERROR = object()

NOT_FOUND_HTML = "<html><head><title>Page Not Found</title></head><body></body></html>"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def make_page(routes: dict) -> StaticPage:
    """
    Build a StaticPage serving routes.

    routes maps absolute URL -> HTML string, (status, HTML) tuple,
    ("redirect", target URL) tuple or CONNECT_ERROR. Unknown URLs get a 404
    "Page Not Found" document.
    """
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        requested.append(url)
        route = routes.get(url)
        if route is None:
            return httpx.Response(404, html=NOT_FOUND_HTML)
        if route is CONNECT_ERROR:
            raise httpx.ConnectError("Connection refused", request=request)
        if isinstance(route, tuple):
            if route[0] == "redirect":
                return httpx.Response(302, headers={"Location": route[1]})
            return httpx.Response(route[0], html=route[1])
        return httpx.Response(200, html=route)

    page = StaticPage(transport=httpx.MockTransport(handler))
    page.requested = requested
    return page


class BrokenBrowserPage(BasePage):
    """Page whose browser never starts; counts start attempts."""

    def __init__(self):
        self.start_attempts = 0

    async def _start(self):
        self.start_attempts += 1
        raise BrowserStartError("Chromium browser not found. Run: playwright install chromium")

    async def navigate(self, url, timeout, wait_until='load'):
        await self._start()

    async def url(self):
        await self._start()

    async def title(self):
        await self._start()

    async def query(self, selector):
        await self._start()

    async def wait_for_selector(self, selector, timeout):
        await self._start()

    async def content(self):
        await self._start()

    async def __aenter__(self):
        await self._start()
        return self


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def page_factory():
    """make_page as a fixture."""
    return make_page


@pytest.fixture
def html():
    """load_fixture as a fixture."""
    return load_fixture


@pytest.fixture
def connect_error():
    return CONNECT_ERROR


@pytest.fixture
def broken_browser_page():
    return BrokenBrowserPage()


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def uk():
    return get_marketplace("UK")


@pytest.fixture
def de():
    return get_marketplace("DE")


@pytest.fixture
def sample_reference():
    return SellerReference(
        display_text="Acme Trading",
        seller_id="A1XYZ",
        source_url="https://www.amazon.co.uk/gp/aag/main?seller=A1XYZ",
        discovery_strategy="aag",
    )


@pytest.fixture
def sample_profile():
    return SellerProfile(
        seller_display_name="Acme Trading",
        business_name="Acme Trading Ltd",
        vat_number="GB123456789",
        phone_number="+44 20 1234 5678",
        email="info@acme.example",
        rating=4.6,
        positive_percent=92,
        rating_count=1234,
        has_detailed_info=True,
    )


@pytest.fixture
def sample_target(uk):
    return ProductMarketplaceTarget(product_id="B07YDVWL4J", marketplace=uk)
