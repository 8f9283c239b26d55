"""
Company employee records: nested LinkedIn profiles.

The employer comes from ``currentPosition[0]``; its LinkedIn URL falls back
to the company URL the batch was scraped for.
"""

from typing import Any, Dict, List, Optional

from lead_reconciler.schemas.fragments import CompanyFragment, PersonFragment, RecordFragments
from lead_reconciler.services.ingestion.base import AdapterContext, as_text, join_full_name
from lead_reconciler.utils.normalize import (
    normalize_bool,
    normalize_int,
    normalize_string_list,
    normalize_text,
    normalize_timestamp,
    normalize_url_or_array_wrapped,
)


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _dict_list(value: Any) -> Optional[List[Dict[str, Any]]]:
    if not isinstance(value, list):
        return None
    items = [item for item in value if isinstance(item, dict)]
    return items or None


def _picture_url(raw: Dict[str, Any]) -> Optional[str]:
    photo = normalize_text(raw.get("photo"))
    if photo:
        return photo
    return normalize_text(_dict(raw.get("profilePicture")).get("url"))


def company_employee_fragments(raw: Dict[str, Any], context: AdapterContext) -> RecordFragments:
    first_name = as_text(raw, "firstName")
    last_name = as_text(raw, "lastName")
    headline = as_text(raw, "headline")

    positions = _dict_list(raw.get("currentPosition"))
    current = positions[0] if positions else {}
    location = _dict(_dict(raw.get("location")).get("parsed"))

    person = PersonFragment(
        external_person_id=as_text(raw, "id"),
        public_identifier=as_text(raw, "publicIdentifier"),
        linkedin_url=normalize_url_or_array_wrapped(raw.get("linkedinUrl")),
        first_name=first_name,
        last_name=last_name,
        full_name=join_full_name(first_name, last_name),
        headline=headline,
        about=as_text(raw, "about"),
        position=normalize_text(current.get("position")) or headline,
        city=normalize_text(location.get("city")),
        state=normalize_text(location.get("state")),
        country=normalize_text(location.get("country")),
        profile_picture=_picture_url(raw),
        object_urn=as_text(raw, "objectUrn"),
        connections_count=normalize_int(raw.get("connectionsCount")),
        follower_count=normalize_int(raw.get("followerCount")),
        registered_at=normalize_timestamp(raw.get("registeredAt")),
        open_to_work=normalize_bool(raw.get("openToWork")),
        verified=normalize_bool(raw.get("verified")),
        current_position=positions,
        experience=_dict_list(raw.get("experience")),
        education=_dict_list(raw.get("education")),
        top_skills=normalize_string_list(raw.get("topSkills")),
    )

    company = CompanyFragment(
        name=normalize_text(current.get("companyName")),
        linkedin_url=(
            normalize_url_or_array_wrapped(current.get("companyLinkedinUrl"))
            or normalize_url_or_array_wrapped(context.company_linkedin_url)
        ),
    )

    return RecordFragments(person=person, company=company)
