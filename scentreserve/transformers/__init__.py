"""Transformers turning raw scraped text into clean product records."""

from .notes import BOTTOM_NOTES, MIDDLE_NOTES, TOP_NOTES, sanitize_note
from .product_transformer import FragranceNotes, Product, ProductTransformer, ProductStub

__all__ = [
    "sanitize_note",
    "TOP_NOTES",
    "MIDDLE_NOTES",
    "BOTTOM_NOTES",
    "ProductStub",
    "FragranceNotes",
    "Product",
    "ProductTransformer",
]
