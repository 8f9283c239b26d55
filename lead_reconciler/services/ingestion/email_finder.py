"""
Email discovery results: ``{firstName, lastName, domain, email, status, certainty}``.

Only ``FOUND`` results carrying an email are ingested. The organization is
known by domain only.
"""

from typing import Any, Dict

from lead_reconciler.schemas.fragments import CompanyFragment, PersonFragment, RecordFragments
from lead_reconciler.services.ingestion.base import AdapterContext, as_text, join_full_name
from lead_reconciler.utils.normalize import normalize_email, normalize_text

FOUND = "FOUND"


def email_finder_fragments(raw: Dict[str, Any], context: AdapterContext) -> RecordFragments:
    status = (normalize_text(raw.get("status")) or "").upper()
    email = normalize_email(raw.get("email"))
    if status != FOUND or not email:
        return RecordFragments(skip_reason="email_not_found")

    first_name = as_text(raw, "firstName")
    last_name = as_text(raw, "lastName")
    person = PersonFragment(
        first_name=first_name,
        last_name=last_name,
        full_name=join_full_name(first_name, last_name) if first_name and last_name else None,
        email=email,
        email_certainty=as_text(raw, "certainty"),
    )
    return RecordFragments(
        person=person,
        company=CompanyFragment(domain=normalize_text(raw.get("domain"))),
    )
