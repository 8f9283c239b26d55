"""
EntityScraperUsage repository - append-only audit rows.
"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.models.entity_scraper_usage import EntityScraperUsage


class ScraperUsageRepository:
    """Repository for EntityScraperUsage database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def create(
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
    ) -> EntityScraperUsage:
        usage = EntityScraperUsage(
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
        self.db.add(usage)
        await self.db.flush()
        return usage
