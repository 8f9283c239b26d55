"""Source adapters for batch ingestion."""

from lead_reconciler.services.ingestion.sources import SOURCES, SourceSpec, get_source

__all__ = [
    "SOURCES",
    "SourceSpec",
    "get_source",
]
