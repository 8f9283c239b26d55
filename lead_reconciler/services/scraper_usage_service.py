"""
Best-effort audit of which source/job touched which entity.

A failed audit write is logged and swallowed; it never fails or rolls back
the ingestion that triggered it.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.core.config import settings
from lead_reconciler.repositories.scraper_usage_repository import ScraperUsageRepository

logger = logging.getLogger(__name__)

ENTITY_LEAD = "lead"


class ScraperUsageService:
    """Usage recorder writing EntityScraperUsage rows inside their own savepoint."""

    def __init__(self, db: AsyncSession, enabled: Optional[bool] = None):
        self.db = db
        self.repo = ScraperUsageRepository(db)
        self.enabled = settings.RECORD_SCRAPER_USAGE if enabled is None else enabled

    async def record(
        self,
        entity_type: str,
        entity_id: int,
        source_tag: str,
        succeeded: bool,
        item_count: int,
        owner_user_id: int,
        scraper_id: Optional[int] = None,
        source_job_id: Optional[str] = None,
        config_snapshot: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Returns True when the row was written."""
        if not self.enabled:
            return False

        try:
            async with self.db.begin_nested():
                await self.repo.create(
                    entity_type=entity_type,
                    entity_id=entity_id,
                    source_tag=source_tag,
                    succeeded=succeeded,
                    item_count=item_count,
                    owner_user_id=owner_user_id,
                    scraper_id=scraper_id,
                    source_job_id=source_job_id,
                    config_snapshot=config_snapshot,
                )
        except Exception:
            logger.warning(
                "Usage record failed for %s %s (source=%s, job=%s)",
                entity_type,
                entity_id,
                source_tag,
                source_job_id,
                exc_info=True,
            )
            return False
        return True
