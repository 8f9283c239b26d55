"""
Adapter interface for ingestion sources.

An adapter is a plain function turning one raw upstream record into
RecordFragments. Adapters never touch the database.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from lead_reconciler.schemas.fragments import RecordFragments
from lead_reconciler.utils.normalize import normalize_string_list, normalize_text


@dataclass(frozen=True)
class AdapterContext:
    """Batch-level values some adapters fall back on."""

    company_linkedin_url: Optional[str] = None


class RecordAdapter(Protocol):
    """Interface for source adapters."""

    def __call__(self, raw: Dict[str, Any], context: AdapterContext) -> RecordFragments:
        ...


def join_full_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    parts = [part for part in (first_name, last_name) if part]
    return " ".join(parts) if parts else None


def join_list(raw: Any) -> Optional[str]:
    """``"['sales', 'it']"`` or ``["sales", "it"]`` -> ``"sales, it"``."""
    items = normalize_string_list(raw)
    return ", ".join(items) if items else None


def leftover_keys(raw: Dict[str, Any], consumed: List[str]) -> Dict[str, Any]:
    """Raw entries not consumed by any alias, for the fragment's extra map."""
    used = set(consumed)
    return {key: value for key, value in raw.items() if key not in used and value is not None}


def as_text(raw: Dict[str, Any], *keys: str) -> Optional[str]:
    """First alias with a non-empty text value."""
    for key in keys:
        value = normalize_text(raw.get(key))
        if value:
            return value
    return None
