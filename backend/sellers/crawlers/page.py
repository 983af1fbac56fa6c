"""
Navigable page abstraction used by the discovery and profile code.

The pipeline only talks to BasePage; concrete drivers (Playwright, plain
HTTP) subclass it. Extraction never touches a live DOM directly: evaluate()
snapshots the rendered HTML into BeautifulSoup and runs a pure function on
it, so the same extraction code runs against live pages and test fixtures.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, TypeVar

from bs4 import BeautifulSoup

T = TypeVar('T')


class PageError(Exception):
    """Base error raised by page drivers."""


class NavigationError(PageError):
    """Navigation failed: timeout, network error or closed browser."""


class BrowserStartError(Exception):
    """
    The browser could not be started.

    Not a PageError: per-page handlers must let it through, since no later
    unit of work can succeed without a browser.
    """


@dataclass(frozen=True)
class ElementInfo:
    """Read-only snapshot of a queried element."""
    text: str
    attributes: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)


class BasePage(ABC):
    """
    Capability interface over one browser tab (or its HTTP equivalent).

    Subclasses must implement:
    - navigate(): load a URL within a timeout, raising NavigationError
    - url() / title(): where we ended up after redirects
    - query(): first element matching a CSS selector, or None
    - wait_for_selector(): bounded wait, returning whether it appeared
    - content(): rendered HTML of the current document
    """

    @abstractmethod
    async def navigate(self, url: str, timeout: float, wait_until: str = 'load') -> None:
        """Load url, waiting at most timeout seconds."""

    @abstractmethod
    async def url(self) -> str:
        """Current URL (after redirects)."""

    @abstractmethod
    async def title(self) -> str:
        """Current document title."""

    @abstractmethod
    async def query(self, selector: str) -> Optional[ElementInfo]:
        """First element matching selector, or None."""

    @abstractmethod
    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        """Wait up to timeout seconds for selector; True if it appeared."""

    @abstractmethod
    async def content(self) -> str:
        """Rendered HTML of the current document."""

    async def close(self) -> None:
        """Release driver resources."""

    async def soup(self) -> BeautifulSoup:
        """Parse the current document."""
        return BeautifulSoup(await self.content(), 'html.parser')

    async def evaluate(self, extractor: Callable[[BeautifulSoup], T]) -> T:
        """Run a read-only extraction function over the rendered document."""
        return extractor(await self.soup())

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def element_info(tag) -> ElementInfo:
    """Snapshot a BeautifulSoup tag into an ElementInfo."""
    attributes = {}
    for name, value in tag.attrs.items():
        attributes[name] = ' '.join(value) if isinstance(value, list) else str(value)
    return ElementInfo(text=tag.get_text().strip(), attributes=attributes)
