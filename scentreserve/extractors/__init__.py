"""Extractors for Scent Reserve listing and product pages."""

from .detail_extractor import (
    DetailFailure,
    DetailResult,
    ProductDetailExtractor,
    extract_from_accordion,
    extract_from_selectors,
    extract_notes,
)
from .http import build_client
from .listing_extractor import ListingPage, ListingPaginator, PaginationEnd, parse_listing_page

__all__ = [
    "build_client",
    "ListingPaginator",
    "ListingPage",
    "PaginationEnd",
    "parse_listing_page",
    "ProductDetailExtractor",
    "DetailFailure",
    "DetailResult",
    "extract_notes",
    "extract_from_selectors",
    "extract_from_accordion",
]
