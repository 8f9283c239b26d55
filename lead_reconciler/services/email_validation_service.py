"""
Apply email validation results to existing leads.

Merge-only: results are matched through an email -> lead id map built from
the collection before the job ran. Unmatched emails are skipped; nothing
is ever created.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.repositories.lead_repository import LeadRepository
from lead_reconciler.schemas.ingestion import IngestionSummary, JobContext, RecordFailure
from lead_reconciler.services.certainty import is_at_least_as_certain
from lead_reconciler.services.lead_ingestion_service import (
    describe_failure,
    ensure_batch_size,
    ensure_collection,
)
from lead_reconciler.services.scraper_usage_service import ENTITY_LEAD, ScraperUsageService
from lead_reconciler.utils.normalize import first_present, normalize_email, normalize_text

logger = logging.getLogger(__name__)

SOURCE_TAG = "verify_email"

VALID = "valid"
UNKNOWN = "unknown"

# Certainty granted to an address the validator accepted
VALID_CERTAINTY = "sure"

_STATUS_MAP = {
    "valid": "ok",
    "invalid": "invalid",
    "catch_all": "ok_for_all",
    "accept_all": "ok_for_all",
}


def map_validation_result(result: Optional[str]) -> str:
    """Validator result -> stored verification status."""
    cleaned = normalize_text(result)
    if not cleaned:
        return UNKNOWN
    lowered = cleaned.lower()
    return _STATUS_MAP.get(lowered, lowered)


class EmailValidationService:
    """Validation-only ingestor."""

    def __init__(self, db: AsyncSession, usage: Optional[ScraperUsageService] = None):
        self.db = db
        self.repo = LeadRepository(db)
        self.usage = usage or ScraperUsageService(db)

    async def build_email_to_lead_id(
        self,
        owner_user_id: int,
        collection_id: int,
        force: bool = False,
    ) -> Dict[str, int]:
        """Lowercased email -> lead id for the collection; the oldest lead wins a shared email."""
        await ensure_collection(self.db, owner_user_id, collection_id)
        leads = await self.repo.list_with_email_in_collection(
            owner_user_id,
            collection_id,
            include_verified=force,
        )
        mapping: Dict[str, int] = {}
        for lead in leads:
            email = normalize_email(lead.email)
            if email and email not in mapping:
                mapping[email] = lead.id
        return mapping

    async def apply_results(
        self,
        results: Sequence[Any],
        email_to_lead_id: Dict[str, int],
        owner_user_id: int,
        job: Optional[JobContext] = None,
    ) -> IngestionSummary:
        job = job or JobContext()
        summary = IngestionSummary()
        verified_at = datetime.now(timezone.utc)

        for index, row in enumerate(results):
            try:
                async with self.db.begin_nested():
                    lead_id, result = await self._apply_one(row, email_to_lead_id, owner_user_id, verified_at)
            except Exception as exc:
                summary.errors += 1
                summary.failures.append(RecordFailure(index=index, reason=describe_failure(exc)))
                logger.exception("Applying validation result %s failed: %r", index, row)
                continue

            if lead_id is None:
                summary.skipped += 1
                continue

            summary.enriched += 1
            await self.usage.record(
                entity_type=ENTITY_LEAD,
                entity_id=lead_id,
                source_tag=SOURCE_TAG,
                succeeded=result == VALID,
                item_count=1,
                owner_user_id=owner_user_id,
                scraper_id=job.source_scraper_id,
                source_job_id=job.source_job_id,
                config_snapshot=job.config_snapshot,
            )

        logger.info(
            "Applied %s validation results: enriched=%s skipped=%s errors=%s",
            len(results),
            summary.enriched,
            summary.skipped,
            summary.errors,
        )
        return summary

    async def _apply_one(
        self,
        row: Any,
        email_to_lead_id: Dict[str, int],
        owner_user_id: int,
        verified_at: datetime,
    ):
        if not isinstance(row, dict):
            raise TypeError(f"result must be an object, got {type(row).__name__}")

        email = normalize_email(row.get("email"))
        if not email:
            return None, None

        lead_id = email_to_lead_id.get(email)
        if lead_id is None:
            return None, None

        lead = await self.repo.get_by_id(owner_user_id, lead_id)
        if lead is None:
            return None, None

        result = (normalize_text(first_present(row, "email_result", "result")) or UNKNOWN).lower()
        certainty = None
        if result == VALID and is_at_least_as_certain(VALID_CERTAINTY, lead.email_certainty):
            certainty = VALID_CERTAINTY

        await self.repo.set_verification(
            lead,
            map_validation_result(result),
            verified_at,
            email_certainty=certainty,
        )
        return lead_id, result

    async def verify_collection(
        self,
        results: Sequence[Any],
        owner_user_id: int,
        collection_id: int,
        force: bool = False,
        job: Optional[JobContext] = None,
    ) -> IngestionSummary:
        """Build the lookup map from the collection, then apply ``results``."""
        ensure_batch_size(len(results))
        email_to_lead_id = await self.build_email_to_lead_id(owner_user_id, collection_id, force=force)
        return await self.apply_results(results, email_to_lead_id, owner_user_id, job=job)
