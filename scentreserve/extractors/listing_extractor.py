"""
Listing paginator for the Scent Reserve collection pages.

Walks `?page=1, 2, ...` until the store renders its "No products found"
title, keeping only grid items whose names look like numbered inspired-by
fragrances.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Optional, Union

import httpx
from bs4 import BeautifulSoup

from config.settings import ScraperConfig
from ..transformers.product_transformer import ProductStub
from .http import fetch_document, parse_html

logger = logging.getLogger(__name__)


class PaginationEnd(Enum):
    """Why the paginator stopped."""

    END_MARKER = "end_marker"  # store said "No products found"
    ERROR = "error"  # a listing page could not be fetched or parsed
    MAX_PAGES = "max_pages"  # configured safety limit reached


@dataclass(frozen=True)
class ListingPage:
    """Stubs found on one listing page."""

    page_number: int
    stubs: list[ProductStub] = field(default_factory=list)
    is_last: bool = False


def parse_listing_page(
    soup: Union[BeautifulSoup, str],
    page_number: int,
    scraper_config: ScraperConfig,
) -> ListingPage:
    """
    Extract product stubs from a parsed listing page.

    A page whose title contains the end-of-listing marker comes back with
    `is_last=True` and no stubs. A page with no matching items but without
    the marker is an ordinary (empty) page.
    """
    if isinstance(soup, str):
        soup = parse_html(soup)

    title = soup.select_one(scraper_config.title_selector)
    title_text = title.get_text().strip() if title else ""
    if scraper_config.end_of_listing_marker in title_text:
        return ListingPage(page_number=page_number, is_last=True)

    patterns = scraper_config.compiled_name_patterns()
    stubs = []
    for item in soup.select(scraper_config.grid_item_selector):
        anchor = item.select_one(scraper_config.product_link_selector)
        if anchor is None:
            continue

        name = anchor.get_text().strip()
        href = anchor.get("href") or ""
        if not name or not href:
            continue

        if any(pattern.search(name) for pattern in patterns):
            stubs.append(ProductStub(name=name, url=scraper_config.product_url(href)))
        else:
            logger.debug("Skipping non-matching listing item: %r", name)

    return ListingPage(page_number=page_number, stubs=stubs)


class ListingPaginator:
    """Yields one ListingPage per collection page, in order."""

    def __init__(self, client: httpx.AsyncClient, scraper_config: ScraperConfig):
        self.client = client
        self.config = scraper_config
        self.end_reason: Optional[PaginationEnd] = None
        self.pages_scraped: int = 0
        self.last_error: Optional[str] = None

    async def fetch_page(self, page_number: int) -> ListingPage:
        """Fetch and parse a single listing page."""
        url = self.config.page_url(page_number)
        logger.info("Scraping page %d: %s", page_number, url)
        soup = await fetch_document(self.client, url)
        return parse_listing_page(soup, page_number, self.config)

    async def iter_pages(self, start_page: int = 1) -> AsyncIterator[ListingPage]:
        """
        Walk listing pages starting at `start_page`.

        Stops on the end-of-listing marker, on the first page that fails to
        load (logged, not raised), or after `max_pages` pages when set.
        `end_reason` tells the caller which one happened.

        Args:
            start_page: First page number to request (1-based)
        """
        self.end_reason = None
        self.pages_scraped = 0
        self.last_error = None
        page_number = start_page

        while True:
            if self.config.max_pages and self.pages_scraped >= self.config.max_pages:
                logger.info("Reached max_pages=%d, stopping", self.config.max_pages)
                self.end_reason = PaginationEnd.MAX_PAGES
                return

            try:
                page = await self.fetch_page(page_number)
            except Exception as e:
                logger.error(
                    "Error on page %d (%s): %s",
                    page_number,
                    self.config.page_url(page_number),
                    e,
                )
                self.last_error = str(e)
                self.end_reason = PaginationEnd.ERROR
                return

            self.pages_scraped += 1
            if page.is_last:
                logger.info("No products on page %d, listing finished", page_number)
                self.end_reason = PaginationEnd.END_MARKER
                return

            logger.info(
                "Page %d: %d matching products", page_number, len(page.stubs)
            )
            yield page
            page_number += 1
