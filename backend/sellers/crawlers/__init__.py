"""Page drivers for different fetching backends."""

from .page import BasePage, BrowserStartError, ElementInfo, NavigationError, PageError
from .static import StaticPage
from .stealth import StealthPage

__all__ = [
    'BasePage',
    'BrowserStartError',
    'ElementInfo',
    'NavigationError',
    'PageError',
    'StaticPage',
    'StealthPage',
]
