"""
Cleaning of fragrance-note text scraped from product pages.
"""

import re
from typing import Optional

TOP_NOTES = "Top Notes"
MIDDLE_NOTES = "Middle Notes"
BOTTOM_NOTES = "Bottom Notes"


def sanitize_note(raw_note: Optional[str], note_type: str) -> str:
    """
    Strip a leading note label (e.g. "Top Notes:") and surrounding whitespace.

    Args:
        raw_note: Raw text as found on the page (may be empty or None)
        note_type: Label to remove, matched case-insensitively

    Returns:
        Cleaned note text, or "" when there is nothing to clean
    """
    if not raw_note:
        return ""
    label = re.compile(rf"^\s*{re.escape(note_type)}\s*:?\s*", re.IGNORECASE)
    return label.sub("", raw_note, count=1).strip()
