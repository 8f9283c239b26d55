"""
Collection repository - collections and lead membership.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.models.collection import Collection, LeadCollection


class CollectionRepository:
    """Repository for Collection and LeadCollection database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_for_owner(self, owner_user_id: int, collection_id: int) -> Optional[Collection]:
        """Get a collection by ID, only if it belongs to the owner."""
        result = await self.db.execute(
            select(Collection).where(
                Collection.id == collection_id,
                Collection.owner_user_id == owner_user_id,
            )
        )
        return result.scalar_one_or_none()
    
    async def get_membership(self, lead_id: int, collection_id: int) -> Optional[LeadCollection]:
        result = await self.db.execute(
            select(LeadCollection).where(
                LeadCollection.lead_id == lead_id,
                LeadCollection.collection_id == collection_id,
            )
        )
        return result.scalar_one_or_none()
    
    async def link_lead(self, lead_id: int, collection_id: int) -> bool:
        """
        Attach a lead to a collection.
        
        Returns True when a membership row was inserted, False when the pair
        already existed. A concurrent insert of the same pair hits the unique
        constraint and is treated as already linked.
        """
        if await self.get_membership(lead_id, collection_id):
            return False
        
        try:
            async with self.db.begin_nested():
                self.db.add(LeadCollection(lead_id=lead_id, collection_id=collection_id))
                await self.db.flush()
        except IntegrityError:
            return False
        return True
