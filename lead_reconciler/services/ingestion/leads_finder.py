"""
Leads-finder records: snake_case with several historical aliases per field.

Keys not claimed by any alias are kept in the person's extra map.
"""

from typing import Any, Dict

from lead_reconciler.schemas.fragments import CompanyFragment, PersonFragment, RecordFragments
from lead_reconciler.services.ingestion.base import (
    AdapterContext,
    as_text,
    join_full_name,
    join_list,
    leftover_keys,
)
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

PERSON_ALIASES = {
    "first_name": ("first_name", "firstName"),
    "last_name": ("last_name", "lastName"),
    "full_name": ("full_name", "fullName"),
    "position": ("position", "job_title", "title"),
    "linkedin_url": ("linkedin", "linkedin_url", "linkedinUrl"),
    "headline": ("headline", "headLine"),
    "seniority": ("seniority", "seniority_level"),
    "functional": ("functional", "functional_level"),
    "email": ("email", "business_email", "work_email"),
    "personal_email": ("personal_email", "personalEmail"),
    "email_certainty": ("email_certainty", "emailCertainty", "email_status"),
    "phone": ("phone", "phone_numbers", "mobile", "mobile_number"),
    "city": ("city", "contact_city"),
    "state": ("state", "contact_state"),
    "country": ("country", "contact_country", "contact_location"),
    "status": ("status",),
    "reason": ("reason",),
    "validated": ("validated",),
}

COMPANY_ALIASES = {
    "name": ("org_name", "orgName", "company_name", "companyName"),
    "website": ("org_website", "orgWebsite", "company_website", "companyWebsite", "website"),
    "linkedin_url": ("org_linkedin_url", "orgLinkedinUrl", "company_linkedin", "company_linkedin_url"),
    "industry": ("org_industry", "orgIndustry", "company_industry", "industry"),
    "size": ("org_size", "orgSize", "company_size", "size"),
    "domain": ("org_domain", "orgDomain", "company_domain", "companyDomain"),
    "technologies": ("org_technologies", "orgTechnologies", "company_technologies", "companyTechnologies"),
    "description": ("org_description", "orgDescription", "company_description"),
    "city": ("org_city", "orgCity", "company_city"),
    "state": ("org_state", "orgState", "company_state"),
    "country": ("org_country", "orgCountry", "company_country"),
    "founded_year": ("org_founded_year", "orgFoundedYear", "founded_year"),
}

_CONSUMED = [key for aliases in (*PERSON_ALIASES.values(), *COMPANY_ALIASES.values()) for key in aliases]


def leads_finder_fragments(raw: Dict[str, Any], context: AdapterContext) -> RecordFragments:
    p = PERSON_ALIASES
    c = COMPANY_ALIASES

    first_name = as_text(raw, *p["first_name"])
    last_name = as_text(raw, *p["last_name"])

    person = PersonFragment(
        first_name=first_name,
        last_name=last_name,
        full_name=as_text(raw, *p["full_name"]) or join_full_name(first_name, last_name),
        position=as_text(raw, *p["position"]),
        linkedin_url=normalize_url_or_array_wrapped(first_present(raw, *p["linkedin_url"])),
        headline=as_text(raw, *p["headline"]),
        seniority=as_text(raw, *p["seniority"]),
        functional_area=join_list(first_present(raw, *p["functional"])),
        email=normalize_email(as_text(raw, *p["email"])),
        personal_email=normalize_email(as_text(raw, *p["personal_email"])),
        email_certainty=as_text(raw, *p["email_certainty"]),
        phone_numbers=normalize_phone_numbers(first_present(raw, *p["phone"])),
        city=as_text(raw, *p["city"]),
        state=as_text(raw, *p["state"]),
        country=as_text(raw, *p["country"]),
        status=as_text(raw, *p["status"]),
        validated=normalize_bool(first_present(raw, *p["validated"])),
        reason=as_text(raw, *p["reason"]),
        extra=leftover_keys(raw, _CONSUMED),
    )

    website = as_text(raw, *c["website"])
    company = CompanyFragment(
        name=as_text(raw, *c["name"]),
        website=website,
        domain=extract_domain(first_present(raw, *c["domain"])) or extract_domain(website),
        linkedin_url=normalize_url_or_array_wrapped(first_present(raw, *c["linkedin_url"])),
        industry=as_text(raw, *c["industry"]),
        size=normalize_size(first_present(raw, *c["size"])),
        technologies=as_text(raw, *c["technologies"]),
        description=as_text(raw, *c["description"]),
        city=as_text(raw, *c["city"]),
        state=as_text(raw, *c["state"]),
        country=as_text(raw, *c["country"]),
        founded_year=normalize_year(first_present(raw, *c["founded_year"])),
    )

    return RecordFragments(person=person, company=company)
