"""
Normalized fragments extracted from one upstream record.

Adapters turn a provider-specific raw record into a PersonFragment and a
CompanyFragment; the resolution engine only ever sees these shapes.
Field names match the Lead / Company column names.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

EXTRA_MAX_KEYS = 50

_JSON_SCALARS = (str, int, float, bool, type(None))


def _json_safe(value: Any) -> bool:
    if isinstance(value, _JSON_SCALARS):
        return True
    if isinstance(value, list):
        return all(_json_safe(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and _json_safe(v) for k, v in value.items())
    return False


class CompanyFragment(BaseModel):
    """Organization view of one upstream record."""

    name: Optional[str] = None
    website: Optional[str] = None
    domain: Optional[str] = None
    linkedin_url: Optional[str] = None
    founded_year: Optional[int] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    description: Optional[str] = None
    specialities: Optional[List[str]] = None
    technologies: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    @property
    def has_name(self) -> bool:
        return bool(self.name and self.name.strip())

    def column_values(self) -> Dict[str, Any]:
        """Populated fields only, ready for a Company insert."""
        return self.model_dump(exclude_none=True)


class PersonFragment(BaseModel):
    """Person view of one upstream record."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    position: Optional[str] = None
    headline: Optional[str] = None
    about: Optional[str] = None
    seniority: Optional[str] = None
    functional_area: Optional[str] = None

    email: Optional[str] = None
    email_certainty: Optional[str] = None
    personal_email: Optional[str] = None
    linkedin_url: Optional[str] = None
    external_person_id: Optional[str] = None
    public_identifier: Optional[str] = None

    phone_numbers: Optional[List[str]] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    object_urn: Optional[str] = None
    profile_picture: Optional[str] = None
    connections_count: Optional[int] = None
    follower_count: Optional[int] = None
    registered_at: Optional[datetime] = None
    open_to_work: Optional[bool] = None
    verified: Optional[bool] = None
    current_position: Optional[List[Dict[str, Any]]] = None
    experience: Optional[List[Dict[str, Any]]] = None
    education: Optional[List[Dict[str, Any]]] = None
    top_skills: Optional[List[str]] = None

    status: Optional[str] = None
    validated: Optional[bool] = None
    reason: Optional[str] = None

    # Unrecognized upstream keys, bounded and JSON-safe
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("extra")
    @classmethod
    def bound_extra(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        kept: Dict[str, Any] = {}
        for key, item in value.items():
            if len(kept) >= EXTRA_MAX_KEYS:
                break
            if isinstance(key, str) and item is not None and _json_safe(item):
                kept[key] = item
        return kept

    @property
    def has_match_key(self) -> bool:
        """True when a later run can find this person again by key."""
        return bool(self.email or self.linkedin_url or self.public_identifier)

    def column_values(self) -> Dict[str, Any]:
        """Populated fields only, ready for a Lead insert."""
        values = self.model_dump(exclude_none=True, exclude={"extra"})
        if self.extra:
            values["extra"] = dict(self.extra)
        return values


class RecordFragments(BaseModel):
    """Output of a source adapter for one raw record."""

    person: PersonFragment = Field(default_factory=PersonFragment)
    company: CompanyFragment = Field(default_factory=CompanyFragment)
    # Set when the record must be counted as skipped without touching the store
    skip_reason: Optional[str] = None
