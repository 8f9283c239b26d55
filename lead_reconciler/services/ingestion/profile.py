"""
Generic profile + company records (camelCase, organization fields prefixed "org").
"""

from typing import Any, Dict

from lead_reconciler.schemas.fragments import CompanyFragment, PersonFragment, RecordFragments
from lead_reconciler.services.ingestion.base import AdapterContext, as_text, join_full_name, join_list
from lead_reconciler.utils.normalize import (
    extract_domain,
    first_present,
    normalize_bool,
    normalize_email,
    normalize_phone_numbers,
    normalize_size,
    normalize_url_or_array_wrapped,
    normalize_year,
)


def profile_fragments(raw: Dict[str, Any], context: AdapterContext) -> RecordFragments:
    first_name = as_text(raw, "firstName")
    last_name = as_text(raw, "lastName")

    person = PersonFragment(
        first_name=first_name,
        last_name=last_name,
        full_name=as_text(raw, "fullName") or join_full_name(first_name, last_name),
        position=as_text(raw, "position"),
        linkedin_url=normalize_url_or_array_wrapped(raw.get("linkedinUrl")),
        headline=as_text(raw, "headline"),
        seniority=as_text(raw, "seniority"),
        functional_area=join_list(raw.get("functional")),
        email=normalize_email(raw.get("email")),
        email_certainty=as_text(raw, "emailCertainty"),
        personal_email=normalize_email(raw.get("personalEmail")),
        phone_numbers=normalize_phone_numbers(first_present(raw, "phoneNumbers", "phone")),
        city=as_text(raw, "city"),
        state=as_text(raw, "state"),
        country=as_text(raw, "country"),
        status=as_text(raw, "status"),
        validated=normalize_bool(raw.get("validated")),
        reason=as_text(raw, "reason"),
    )

    website = as_text(raw, "orgWebsite")
    company = CompanyFragment(
        name=as_text(raw, "orgName"),
        website=website,
        domain=extract_domain(raw.get("orgDomain")) or extract_domain(website),
        linkedin_url=normalize_url_or_array_wrapped(raw.get("orgLinkedinUrl")),
        founded_year=normalize_year(raw.get("orgFoundedYear")),
        industry=as_text(raw, "orgIndustry"),
        size=normalize_size(raw.get("orgSize")),
        technologies=as_text(raw, "orgTechnologies"),
        description=as_text(raw, "orgDescription"),
        city=as_text(raw, "orgCity"),
        state=as_text(raw, "orgState"),
        country=as_text(raw, "orgCountry"),
    )

    return RecordFragments(person=person, company=company)
