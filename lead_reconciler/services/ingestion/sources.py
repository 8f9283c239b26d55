"""
Registry of ingestion sources.

Each source pairs an adapter with the resolution options the engine
applies to its records. Adding a source needs no engine change.
"""

from dataclasses import dataclass
from typing import Dict

from lead_reconciler.errors import AppError
from lead_reconciler.services.ingestion.base import RecordAdapter
from lead_reconciler.services.ingestion.company_employees import company_employee_fragments
from lead_reconciler.services.ingestion.csv_rows import csv_fragments
from lead_reconciler.services.ingestion.email_finder import email_finder_fragments
from lead_reconciler.services.ingestion.leads_finder import leads_finder_fragments
from lead_reconciler.services.ingestion.profile import profile_fragments


@dataclass(frozen=True)
class SourceSpec:
    name: str
    adapter: RecordAdapter
    # Resolve the organization from a bare domain instead of name/domain/website
    company_by_domain: bool = False
    # Allow first + last name (+ company) matching when no identity key matches
    name_fallback: bool = False


PROFILE = SourceSpec("profile", profile_fragments)
LEADS_FINDER = SourceSpec("leads-finder", leads_finder_fragments)
CSV = SourceSpec("csv", csv_fragments)
COMPANY_EMPLOYEES = SourceSpec("company-employees", company_employee_fragments)
EMAIL_FINDER = SourceSpec(
    "email-finder",
    email_finder_fragments,
    company_by_domain=True,
    name_fallback=True,
)

SOURCES: Dict[str, SourceSpec] = {
    spec.name: spec
    for spec in (PROFILE, LEADS_FINDER, CSV, COMPANY_EMPLOYEES, EMAIL_FINDER)
}


def get_source(name: str) -> SourceSpec:
    spec = SOURCES.get(name)
    if spec is None:
        raise AppError(
            400,
            "UNKNOWN_SOURCE",
            f"Unknown ingestion source '{name}'",
            {"supported": sorted(SOURCES)},
        )
    return spec
