"""
Certainty ranking for discovered email addresses.

Every email-overwrite decision goes through ``is_at_least_as_certain``.
Labels are an open set: unknown labels get ``DEFAULT_RANK`` rather than
failing, so a new provider label degrades gracefully.
"""

from typing import Optional

CERTAINTY_RANKS = {
    "ultra_sure": 3,
    "sure": 2,
}

# Unrecognized labels rank just above "no label at all"
DEFAULT_RANK = 1


def _clean(label: Optional[str]) -> Optional[str]:
    if label is None:
        return None
    cleaned = str(label).strip().lower()
    return cleaned or None


def certainty_rank(label: Optional[str]) -> int:
    """Rank of a label; 0 when absent."""
    cleaned = _clean(label)
    if cleaned is None:
        return 0
    return CERTAINTY_RANKS.get(cleaned, DEFAULT_RANK)


def is_at_least_as_certain(new_label: Optional[str], existing_label: Optional[str]) -> bool:
    """True when a value tagged ``new_label`` may replace one tagged ``existing_label``."""
    if _clean(existing_label) is None:
        return True
    if _clean(new_label) is None:
        return False
    return certainty_rank(new_label) >= certainty_rank(existing_label)
