"""
Product transformer for cleaning and merging scraped data.

A listing stub (name + URL) and the notes found on its product page are
merged into one validated Product record, the unit written to products.json.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .notes import BOTTOM_NOTES, MIDDLE_NOTES, TOP_NOTES, sanitize_note

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductStub:
    """Product identity found on a listing page, before enrichment."""

    name: str
    url: str


@dataclass(frozen=True)
class FragranceNotes:
    """Top / middle / bottom notes of a product ("" when not found)."""

    top_notes: str = ""
    middle_notes: str = ""
    bottom_notes: str = ""

    @classmethod
    def from_raw(
        cls,
        top: Optional[str],
        middle: Optional[str],
        bottom: Optional[str],
    ) -> "FragranceNotes":
        """Build notes from raw page text, stripping the tier labels."""
        return cls(
            top_notes=sanitize_note(top, TOP_NOTES),
            middle_notes=sanitize_note(middle, MIDDLE_NOTES),
            bottom_notes=sanitize_note(bottom, BOTTOM_NOTES),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.top_notes or self.middle_notes or self.bottom_notes)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Product(BaseModel):
    """Validated product record as stored in products.json."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    url: str
    top_notes: str = Field(default="", alias="topNotes")
    middle_notes: str = Field(default="", alias="middleNotes")
    bottom_notes: str = Field(default="", alias="bottomNotes")
    last_updated: str = Field(default_factory=utc_now_iso, alias="lastUpdated")

    @field_validator("name", "url")
    @classmethod
    def require_text(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("top_notes", "middle_notes", "bottom_notes", mode="before")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("last_updated")
    @classmethod
    def check_timestamp(cls, v: str) -> str:
        datetime.fromisoformat(v.replace("Z", "+00:00"))
        return v

    def to_json_dict(self) -> dict:
        """Dict in the camelCase shape the quiz front-end reads."""
        return self.model_dump(mode="json", by_alias=True)


class ProductTransformer:
    """Merges listing stubs with their fragrance notes."""

    def transform(
        self,
        stub: ProductStub,
        notes: FragranceNotes,
        last_updated: Optional[str] = None,
    ) -> Optional[Product]:
        """Merge a stub and its notes into a Product, stamping the update time."""
        try:
            return Product(
                name=stub.name,
                url=stub.url,
                top_notes=notes.top_notes,
                middle_notes=notes.middle_notes,
                bottom_notes=notes.bottom_notes,
                last_updated=last_updated or utc_now_iso(),
            )
        except ValidationError as e:
            logger.error("Invalid product %r (%s): %s", stub.name, stub.url, e)
            return None
