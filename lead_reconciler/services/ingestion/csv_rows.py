"""
CSV import rows, plus parsing of the uploaded file into row dicts.

Organization columns are prefixed "organization". ``phone_numbers`` may be
a JSON array or a single number; ``validated`` accepts "true"/"1".
"""

import csv
import io
from typing import Any, Dict, List

from lead_reconciler.schemas.fragments import CompanyFragment, PersonFragment, RecordFragments
from lead_reconciler.services.ingestion.base import AdapterContext, as_text, join_full_name, join_list
from lead_reconciler.utils.normalize import (
    extract_domain,
    normalize_email,
    normalize_phone_numbers,
    normalize_size,
    normalize_string_list,
    normalize_url_or_array_wrapped,
    normalize_year,
)


class CSVParseError(ValueError):
    """Raised when an upload cannot be read as CSV."""


def parse_csv_upload(content: bytes) -> List[Dict[str, Any]]:
    """
    Decode an uploaded CSV into one dict per non-empty line.

    Header names are trimmed; values are kept as text. A UTF-8 BOM is
    tolerated.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CSVParseError("File is not UTF-8 encoded") from exc

    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        return []

    rows: List[Dict[str, Any]] = []
    try:
        for row in reader:
            cleaned = {
                (key or "").strip(): value
                for key, value in row.items()
                if key is not None
            }
            if not any(value and str(value).strip() for value in cleaned.values()):
                continue
            rows.append(cleaned)
    except csv.Error as exc:
        raise CSVParseError(f"Malformed CSV: {exc}") from exc
    return rows


def _validated(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = (raw or "").strip().lower() if isinstance(raw, str) else ""
    return text in ("true", "1")


def csv_fragments(raw: Dict[str, Any], context: AdapterContext) -> RecordFragments:
    first_name = as_text(raw, "firstName")
    last_name = as_text(raw, "lastName")

    person = PersonFragment(
        full_name=as_text(raw, "fullName") or join_full_name(first_name, last_name),
        external_person_id=as_text(raw, "personId"),
        first_name=first_name,
        last_name=last_name,
        position=as_text(raw, "position"),
        linkedin_url=normalize_url_or_array_wrapped(raw.get("linkedinUrl")),
        seniority=as_text(raw, "seniority"),
        functional_area=join_list(raw.get("functional")),
        email=normalize_email(raw.get("email")),
        personal_email=normalize_email(raw.get("personal_email")),
        phone_numbers=normalize_phone_numbers(raw.get("phone_numbers")),
        city=as_text(raw, "city"),
        state=as_text(raw, "state"),
        country=as_text(raw, "country"),
        status=as_text(raw, "status"),
        validated=_validated(raw.get("validated")) or None,
        reason=as_text(raw, "reason"),
    )

    website = as_text(raw, "organizationWebsite")
    company = CompanyFragment(
        name=as_text(raw, "organizationName"),
        website=website,
        domain=extract_domain(website),
        linkedin_url=normalize_url_or_array_wrapped(raw.get("organizationLinkedinUrl")),
        founded_year=normalize_year(raw.get("organizationFoundedYear")),
        industry=as_text(raw, "organizationIndustry"),
        size=normalize_size(raw.get("organizationSize")),
        description=as_text(raw, "organizationDescription"),
        specialities=normalize_string_list(raw.get("organizationSpecialities")),
        city=as_text(raw, "organizationCity"),
        state=as_text(raw, "organizationState"),
        country=as_text(raw, "organizationCountry"),
    )

    return RecordFragments(person=person, company=company)
