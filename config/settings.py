"""
Configuration settings for the Scent Reserve scraper ETL pipeline.
"""

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent


@dataclass(frozen=True)
class ScraperConfig:
    """Configuration for the web scraper."""

    # Base URLs
    listing_url: str = "https://thescentreserve.com/collections/all-1"
    site_root: str = "https://thescentreserve.com"

    user_agent: str = "Mozilla/5.0 (compatible; ScentScraper/1.0)"
    timeout_seconds: float = 30.0

    # Rate limiting (be respectful)
    request_delay_seconds: float = 1.0  # Delay between product page loads

    # Safety limit on listing pages (0 = unlimited)
    max_pages: int = 0

    # Listing names we keep, e.g. "598 - Inspired by Mont Blanc"
    name_patterns: tuple = (
        r"^\d+\s*-\s*Inspired by.+",
        r"^\d+\s*x\s*\d+\s*-\s*Blended Inspired by.+",
    )

    # Listing page
    end_of_listing_marker: str = "No products found"
    title_selector: str = ".title"
    grid_item_selector: str = "#product-grid li.grid__item"
    product_link_selector: str = 'a[href^="/products/"]'

    # Product page: one locator per note tier (top, middle, bottom).
    # These follow the current Shopify template and break when it changes.
    note_selectors: tuple = (
        "#ProductAccordion-collapsible_tab_EjJ84U-template--17212741648578__main"
        " > div:nth-child(1) > div:nth-child(1) > div:nth-child(2)"
        " > div:nth-child(1) > p:nth-child(1)",
        "#ProductAccordion-collapsible_tab_EjJ84U-template--17212741648578__main"
        " > div:nth-child(1) > div:nth-child(2) > div:nth-child(2)"
        " > div:nth-child(1) > p:nth-child(1)",
        "#ProductAccordion-collapsible_tab_EjJ84U-template--17212741648578__main"
        " > div:nth-child(1) > div:nth-child(3) > div:nth-child(2)"
        " > div:nth-child(1) > p:nth-child(1)",
    )
    accordion_selector: str = "div.product__accordion:nth-child(17) > div:nth-child(2)"

    def __post_init__(self):
        if self.request_delay_seconds < 0:
            raise ValueError("request_delay_seconds must be >= 0")
        if self.max_pages < 0:
            raise ValueError("max_pages must be >= 0 (0 = unlimited)")
        if not self.name_patterns:
            raise ValueError("name_patterns must not be empty")
        if len(self.note_selectors) != 3:
            raise ValueError("note_selectors needs one selector per note tier (3)")

    def compiled_name_patterns(self) -> list[re.Pattern]:
        """Name patterns compiled case-insensitively."""
        return [re.compile(p, re.IGNORECASE) for p in self.name_patterns]

    def page_url(self, page_number: int) -> str:
        """Listing URL for a page number (query parameter `page`)."""
        sep = "&" if "?" in self.listing_url else "?"
        return f"{self.listing_url}{sep}page={page_number}"

    def product_url(self, href: str) -> str:
        """Absolute product URL from a relative `/products/...` href."""
        return f"{self.site_root.rstrip('/')}{href}"


@dataclass(frozen=True)
class StorageConfig:
    """Configuration for data storage."""

    output_path: Path = field(
        default_factory=lambda: PROJECT_ROOT / "data" / "products.json"
    )
    indent: int = 2

    @property
    def output_dir(self) -> Path:
        """Directory the products file is written to."""
        return self.output_path.parent

    def ensure_dirs(self) -> None:
        """Create necessary directories if they don't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""

    log_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "logs")
    log_level: str = "INFO"
    log_to_file: bool = False
    log_to_console: bool = True

    def ensure_dirs(self) -> None:
        """Create log directory if it doesn't exist."""
        self.log_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class PipelineConfig:
    """Main configuration combining all settings."""

    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "PipelineConfig":
        """
        Build configuration from defaults plus environment overrides.

        Reads a .env file first (if present), then:
            SCENT_LISTING_URL, SCENT_SITE_ROOT, SCENT_OUTPUT_PATH,
            SCENT_REQUEST_DELAY, SCENT_MAX_PAGES, SCENT_LOG_LEVEL
        """
        load_dotenv(env_file)

        defaults = cls()
        scraper_overrides = {}
        if os.getenv("SCENT_LISTING_URL"):
            scraper_overrides["listing_url"] = os.environ["SCENT_LISTING_URL"]
        if os.getenv("SCENT_SITE_ROOT"):
            scraper_overrides["site_root"] = os.environ["SCENT_SITE_ROOT"]
        if os.getenv("SCENT_REQUEST_DELAY"):
            scraper_overrides["request_delay_seconds"] = float(
                os.environ["SCENT_REQUEST_DELAY"]
            )
        if os.getenv("SCENT_MAX_PAGES"):
            scraper_overrides["max_pages"] = int(os.environ["SCENT_MAX_PAGES"])

        storage = defaults.storage
        if os.getenv("SCENT_OUTPUT_PATH"):
            storage = replace(storage, output_path=Path(os.environ["SCENT_OUTPUT_PATH"]))

        logging_config = defaults.logging
        if os.getenv("SCENT_LOG_LEVEL"):
            logging_config = replace(
                logging_config, log_level=os.environ["SCENT_LOG_LEVEL"].upper()
            )

        return cls(
            scraper=replace(defaults.scraper, **scraper_overrides),
            storage=storage,
            logging=logging_config,
        )
