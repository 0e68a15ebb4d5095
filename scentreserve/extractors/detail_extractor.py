"""
Product page extractor for fragrance notes.

Notes are located with an ordered list of strategies. The first strategy
that finds all three tiers wins:

1. `extract_from_selectors` - one CSS locator per tier, tied to the current
   product template.
2. `extract_from_accordion` - regex over the accordion text block:
   "Top Notes: ... Middle Notes: ... Bottom Notes: ...".

If no strategy finds all three, the last partial result is kept and its
missing tiers stay empty.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

import httpx
from bs4 import BeautifulSoup

from config.settings import ScraperConfig
from ..transformers.product_transformer import FragranceNotes
from .http import fetch_document

logger = logging.getLogger(__name__)

NOTES_PATTERN = re.compile(
    r"Top Notes:(.*?)Middle Notes:(.*?)Bottom Notes:(.*)", re.DOTALL
)


@dataclass(frozen=True)
class RawNotes:
    """Unsanitized note text as found on the page."""

    top: str = ""
    middle: str = ""
    bottom: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.top and self.middle and self.bottom)


@dataclass(frozen=True)
class DetailFailure:
    """A product page that could not be fetched or parsed."""

    url: str
    error: str


DetailResult = Union[FragranceNotes, DetailFailure]
ExtractionStrategy = Callable[[BeautifulSoup, ScraperConfig], Optional[RawNotes]]


def _select_text(soup: BeautifulSoup, selector: str) -> str:
    element = soup.select_one(selector)
    return element.get_text().strip() if element else ""


def extract_from_selectors(
    soup: BeautifulSoup, scraper_config: ScraperConfig
) -> Optional[RawNotes]:
    """Read each tier from its own template locator."""
    top, middle, bottom = (
        _select_text(soup, selector) for selector in scraper_config.note_selectors
    )
    if not (top or middle or bottom):
        return None
    return RawNotes(top=top, middle=middle, bottom=bottom)


def extract_from_accordion(
    soup: BeautifulSoup, scraper_config: ScraperConfig
) -> Optional[RawNotes]:
    """Split the accordion's text on the three tier labels."""
    block = soup.select_one(scraper_config.accordion_selector)
    if block is None:
        return None

    match = NOTES_PATTERN.search(block.get_text())
    if not match:
        return None

    top, middle, bottom = match.groups()
    return RawNotes(top=top, middle=middle, bottom=bottom)


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    extract_from_selectors,
    extract_from_accordion,
)


def extract_notes(
    soup: BeautifulSoup,
    scraper_config: ScraperConfig,
    strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
) -> FragranceNotes:
    """
    Run strategies in order and sanitize the first complete result.

    Never raises for missing markup; tiers that cannot be found are "".
    """
    partial: Optional[RawNotes] = None
    for strategy in strategies:
        raw = strategy(soup, scraper_config)
        if raw is None:
            continue
        if raw.is_complete:
            return FragranceNotes.from_raw(raw.top, raw.middle, raw.bottom)
        partial = raw

    raw = partial or RawNotes()
    return FragranceNotes.from_raw(raw.top, raw.middle, raw.bottom)


class ProductDetailExtractor:
    """Fetches product pages and extracts their fragrance notes."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        scraper_config: ScraperConfig,
        strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
    ):
        self.client = client
        self.config = scraper_config
        self.strategies = tuple(strategies)

    async def fetch_details(self, url: str) -> DetailResult:
        """
        Fetch one product page and extract its notes.

        Args:
            url: Absolute product URL

        Returns:
            FragranceNotes (fields may be empty) or DetailFailure when the
            page could not be loaded
        """
        try:
            soup = await fetch_document(self.client, url)
            notes = extract_notes(soup, self.config, self.strategies)
        except Exception as e:
            logger.error("Error scraping product details from %s: %s", url, e)
            return DetailFailure(url=url, error=str(e))

        if notes.is_empty:
            logger.warning("No fragrance notes found on %s", url)
        return notes
