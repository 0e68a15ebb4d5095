"""
Shared HTTP helpers: one async client per run, HTML fetched into BeautifulSoup.
"""

import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from config.settings import ScraperConfig

logger = logging.getLogger(__name__)


def build_client(
    scraper_config: ScraperConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the async client carrying the scraper's User-Agent."""
    return httpx.AsyncClient(
        headers={"User-Agent": scraper_config.user_agent},
        timeout=scraper_config.timeout_seconds,
        follow_redirects=True,
        transport=transport,
    )


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


async def fetch_document(
    client: httpx.AsyncClient,
    url: str,
) -> BeautifulSoup:
    """
    GET a page and parse it.

    Raises:
        httpx.HTTPError: on network failure or a non-2xx response
    """
    response = await client.get(url)
    response.raise_for_status()
    logger.debug("GET %s -> %s (%d bytes)", response.url, response.status_code, len(response.content))
    return parse_html(response.text)
