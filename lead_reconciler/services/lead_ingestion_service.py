"""
Batch ingestion engine.

One loop drives every source: adapt the raw record, resolve the company,
resolve or create the lead, merge, link, audit. Each record runs inside
its own SAVEPOINT so a failure only rolls back that record.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.core.config import settings
from lead_reconciler.db.session import get_async_session_context
from lead_reconciler.errors import AppError
from lead_reconciler.repositories.collection_repository import CollectionRepository
from lead_reconciler.repositories.lead_repository import LeadRepository
from lead_reconciler.schemas.ingestion import IngestionSummary, JobContext, RecordFailure
from lead_reconciler.services.company_resolver_service import CompanyResolverService
from lead_reconciler.services.ingestion.base import AdapterContext
from lead_reconciler.services.ingestion.sources import SourceSpec, get_source
from lead_reconciler.services.lead_resolver_service import LeadResolverService
from lead_reconciler.services.merge_policy import plan_lead_merge
from lead_reconciler.services.scraper_usage_service import ENTITY_LEAD, ScraperUsageService

logger = logging.getLogger(__name__)

CREATED = "created"
ENRICHED = "enriched"
SKIPPED = "skipped"

FAILURE_REASON_MAX = 500


async def ensure_collection(db: AsyncSession, owner_user_id: int, collection_id: int) -> None:
    """Abort before any record is touched when the collection is not the owner's."""
    collection = await CollectionRepository(db).get_for_owner(owner_user_id, collection_id)
    if collection is None:
        raise AppError(
            404,
            "COLLECTION_NOT_FOUND",
            "Collection not found",
            {"collection_id": collection_id},
        )


def ensure_batch_size(count: int) -> None:
    if count > settings.INGEST_MAX_RECORDS:
        raise AppError(
            413,
            "BATCH_TOO_LARGE",
            f"A batch may contain at most {settings.INGEST_MAX_RECORDS} records",
            {"received": count},
        )


def describe_failure(exc: Exception) -> str:
    reason = f"{type(exc).__name__}: {exc}"
    return reason[:FAILURE_REASON_MAX]


class LeadIngestionService:
    """Runs one upstream result set through resolution and merge."""

    def __init__(self, db: AsyncSession, usage: Optional[ScraperUsageService] = None):
        self.db = db
        self.companies = CompanyResolverService(db)
        self.leads = LeadResolverService(db)
        self.lead_repo = LeadRepository(db)
        self.usage = usage or ScraperUsageService(db)

    async def ingest(
        self,
        source: str,
        records: Sequence[Any],
        owner_user_id: int,
        collection_id: int,
        job: Optional[JobContext] = None,
        company_linkedin_url: Optional[str] = None,
    ) -> IngestionSummary:
        """
        Ingest ``records`` from ``source`` into the owner's collection.

        Raises AppError for an unknown source, an oversized batch or a
        collection that does not belong to the owner. Per-record failures
        are counted in ``errors`` and listed in ``failures``.
        """
        spec = get_source(source)
        ensure_batch_size(len(records))
        await ensure_collection(self.db, owner_user_id, collection_id)

        job = job or JobContext()
        context = AdapterContext(company_linkedin_url=company_linkedin_url)
        summary = IngestionSummary()

        for index, raw in enumerate(records):
            try:
                async with self.db.begin_nested():
                    outcome, lead_id = await self._ingest_record(
                        spec, raw, owner_user_id, collection_id, context, job
                    )
            except Exception as exc:
                summary.errors += 1
                summary.failures.append(RecordFailure(index=index, reason=describe_failure(exc)))
                logger.exception(
                    "Ingestion of %s record %s failed: %r", spec.name, index, raw
                )
                continue

            if outcome == CREATED:
                summary.created += 1
            elif outcome == ENRICHED:
                summary.enriched += 1
            else:
                summary.skipped += 1

            if lead_id is not None and job.is_tracked:
                await self.usage.record(
                    entity_type=ENTITY_LEAD,
                    entity_id=lead_id,
                    source_tag=spec.name,
                    succeeded=True,
                    item_count=1,
                    owner_user_id=owner_user_id,
                    scraper_id=job.source_scraper_id,
                    source_job_id=job.source_job_id,
                    config_snapshot=job.config_snapshot,
                )

        logger.info(
            "Ingested %s %s records into collection %s: created=%s enriched=%s skipped=%s errors=%s",
            len(records),
            spec.name,
            collection_id,
            summary.created,
            summary.enriched,
            summary.skipped,
            summary.errors,
        )
        return summary

    async def _ingest_record(
        self,
        spec: SourceSpec,
        raw: Any,
        owner_user_id: int,
        collection_id: int,
        context: AdapterContext,
        job: JobContext,
    ) -> Tuple[str, Optional[int]]:
        if not isinstance(raw, dict):
            raise TypeError(f"record must be an object, got {type(raw).__name__}")

        fragments = spec.adapter(raw, context)
        if fragments.skip_reason:
            logger.debug("Skipping %s record: %s", spec.name, fragments.skip_reason)
            return SKIPPED, None

        person = fragments.person
        # Name-only records are matchable solely where the source enables the name fallback
        if not (person.has_match_key or (spec.name_fallback and person.full_name)):
            logger.debug("Skipping %s record without a match key", spec.name)
            return SKIPPED, None

        if spec.company_by_domain:
            company_id = await self.companies.resolve_by_domain(fragments.company.domain)
        else:
            company_id = await self.companies.resolve_or_create(fragments.company)

        existing = await self.leads.resolve_existing(
            person,
            owner_user_id,
            collection_id,
            company_id=company_id,
            allow_name_fallback=spec.name_fallback,
        )
        if existing is not None:
            changes = plan_lead_merge(existing, person, company_id)
            if changes:
                await self.lead_repo.apply_changes(existing, changes)
            return ENRICHED, existing.id

        lead = await self.leads.create_and_link(
            person,
            owner_user_id,
            collection_id,
            company_id=company_id,
            source_scraper_id=job.source_scraper_id,
        )
        return CREATED, lead.id


async def run_ingestion_job(
    source: str,
    records: List[Dict[str, Any]],
    owner_user_id: int,
    collection_id: int,
    job: Optional[JobContext] = None,
    company_linkedin_url: Optional[str] = None,
) -> IngestionSummary:
    """Entry point for job-completion handlers: runs one batch in its own transaction."""
    async with get_async_session_context() as db:
        service = LeadIngestionService(db)
        return await service.ingest(
            source,
            records,
            owner_user_id,
            collection_id,
            job=job,
            company_linkedin_url=company_linkedin_url,
        )
