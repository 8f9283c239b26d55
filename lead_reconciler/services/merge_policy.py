"""
Merge policy for enriching an existing lead with an incoming fragment.

Default rule: write a field only when the stored value is empty and the
incoming one is not. Email is the single ranked attribute: it is replaced
together with its certainty label when the incoming label is at least as
certain as the stored one. Nothing is ever cleared.
"""

from typing import Any, Dict, Optional

from lead_reconciler.models.lead import Lead
from lead_reconciler.schemas.fragments import EXTRA_MAX_KEYS, PersonFragment
from lead_reconciler.services.certainty import is_at_least_as_certain

# Ranked fields handled outside the fill-if-empty loop
RANKED_FIELDS = {"email", "email_certainty"}

# Non-nullable booleans whose default False means "not set yet"
FALSE_IS_EMPTY = {"validated"}


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _field_is_unset(field: str, value: Any) -> bool:
    if field in FALSE_IS_EMPTY and value is False:
        return True
    return is_empty(value)


def plan_email_change(
    existing_email: Optional[str],
    existing_certainty: Optional[str],
    incoming_email: Optional[str],
    incoming_certainty: Optional[str],
) -> Dict[str, Any]:
    """
    Decide the email / certainty update, always as a pair.
    
    Returns an empty dict when nothing qualifies. The certainty label is
    written only when the incoming one is present.
    """
    if is_empty(incoming_email):
        return {}
    
    if is_empty(existing_email):
        changes: Dict[str, Any] = {"email": incoming_email}
        if not is_empty(incoming_certainty):
            changes["email_certainty"] = incoming_certainty
        return changes
    
    if not is_at_least_as_certain(incoming_certainty, existing_certainty):
        return {}
    
    same_email = existing_email.strip().lower() == incoming_email.strip().lower()
    same_certainty = is_empty(incoming_certainty) or incoming_certainty == existing_certainty
    if same_email and same_certainty:
        return {}
    
    changes = {"email": incoming_email}
    if not is_empty(incoming_certainty):
        changes["email_certainty"] = incoming_certainty
    return changes


def _merge_extra(existing: Optional[Dict[str, Any]], incoming: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not incoming:
        return None
    merged = dict(existing or {})
    added = False
    for key, value in incoming.items():
        if len(merged) >= EXTRA_MAX_KEYS:
            break
        if is_empty(merged.get(key)) and not is_empty(value):
            merged[key] = value
            added = True
    return merged if added else None


def plan_lead_merge(
    lead: Lead,
    fragment: PersonFragment,
    company_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Column changes to apply to ``lead``; empty when the merge is a no-op."""
    changes: Dict[str, Any] = {}
    
    for field, incoming in fragment.column_values().items():
        if field in RANKED_FIELDS or field == "extra":
            continue
        if is_empty(incoming) or (field in FALSE_IS_EMPTY and incoming is False):
            continue
        if _field_is_unset(field, getattr(lead, field, None)):
            changes[field] = incoming
    
    changes.update(
        plan_email_change(
            lead.email,
            lead.email_certainty,
            fragment.email,
            fragment.email_certainty,
        )
    )
    
    if company_id is not None and lead.company_id is None:
        changes["company_id"] = company_id
    
    merged_extra = _merge_extra(lead.extra, fragment.extra)
    if merged_extra is not None:
        changes["extra"] = merged_extra
    
    return changes
