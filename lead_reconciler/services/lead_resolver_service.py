"""
Lead resolution within one {owner, collection} scope.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.models.lead import Lead
from lead_reconciler.repositories.collection_repository import CollectionRepository
from lead_reconciler.repositories.lead_repository import LeadRepository
from lead_reconciler.schemas.fragments import PersonFragment

logger = logging.getLogger(__name__)


class LeadResolverService:
    """Find an existing lead for a person fragment, or create and link a new one."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = LeadRepository(db)
        self.collections = CollectionRepository(db)

    async def resolve_existing(
        self,
        fragment: PersonFragment,
        owner_user_id: int,
        collection_id: int,
        company_id: Optional[int] = None,
        allow_name_fallback: bool = False,
    ) -> Optional[Lead]:
        """
        Look up the lead this fragment refers to.

        Identity keys (email, LinkedIn URL, public identifier) are tried
        first; the first + last name fallback only runs when enabled.
        """
        lead = await self.repo.find_in_collection_by_keys(
            owner_user_id,
            collection_id,
            email=fragment.email,
            linkedin_url=fragment.linkedin_url,
            public_identifier=fragment.public_identifier,
        )
        if lead is not None:
            return lead

        if allow_name_fallback and fragment.first_name and fragment.last_name:
            return await self.repo.find_in_collection_by_name(
                owner_user_id,
                collection_id,
                fragment.first_name,
                fragment.last_name,
                company_id=company_id,
            )
        return None

    async def create_and_link(
        self,
        fragment: PersonFragment,
        owner_user_id: int,
        collection_id: int,
        company_id: Optional[int] = None,
        source_scraper_id: Optional[int] = None,
    ) -> Lead:
        """Insert a lead from every populated fragment field and attach it to the collection."""
        values = fragment.column_values()
        if company_id is not None:
            values["company_id"] = company_id
        if source_scraper_id is not None:
            values["source_scraper_id"] = source_scraper_id

        lead = await self.repo.create(owner_user_id, values)
        await self.link(lead.id, collection_id)
        return lead

    async def link(self, lead_id: int, collection_id: int) -> None:
        """Collection membership; linking an already linked lead is a no-op."""
        inserted = await self.collections.link_lead(lead_id, collection_id)
        if not inserted:
            logger.debug("Lead %s already in collection %s", lead_id, collection_id)
