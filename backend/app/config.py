"""
Application Configuration
Loads settings from environment variables (SELLERS_*) and an optional .env
file, with sensible defaults. Command-line flags override these per run.
"""

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings

from sellers.base import Marketplace, RunOptions
from sellers.config import get_marketplaces


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Input
    product_ids: List[str] = ["B07YDVWL4J"]
    max_products: int = 0  # 0 = no cap
    marketplaces: List[str] = []  # Empty = all configured marketplaces

    # Run options
    delay_between_requests: float = 3.0  # Seconds
    skip_first_party_sellers: bool = True

    # Page driver
    driver: str = "stealth"  # "stealth" (Playwright) or "static" (httpx)
    headless: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    )

    # Timeouts and settle delays (seconds)
    offer_navigation_timeout: float = 45.0
    profile_navigation_timeout: float = 30.0
    selector_timeout: float = 5.0
    offer_fallback_delay: float = 5.0
    profile_settle_delay: float = 1.5

    # Output
    output_file: Optional[str] = "data/sellers.jsonl"
    database_url: Optional[str] = None  # e.g. sqlite:///./data/sellers.db

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Paths
    @property
    def log_dir(self) -> Path:
        """Get the log directory path."""
        return Path(__file__).parent.parent.parent / "logs"

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "sellers.log"

    @property
    def data_dir(self) -> Path:
        """Get the data directory path."""
        return Path(__file__).parent.parent.parent / "data"

    def products_to_process(self) -> List[str]:
        """Product ids after applying max_products."""
        if self.max_products > 0:
            return self.product_ids[:self.max_products]
        return list(self.product_ids)

    def marketplaces_to_scrape(self) -> List[Marketplace]:
        """Configured marketplaces restricted to the selected codes."""
        return get_marketplaces(self.marketplaces)

    def run_options(self) -> RunOptions:
        return RunOptions(
            skip_first_party_sellers=self.skip_first_party_sellers,
            delay_between_requests=self.delay_between_requests,
        )

    class Config:
        env_prefix = "SELLERS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
