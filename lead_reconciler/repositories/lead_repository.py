"""
Lead repository - database operations for Lead.

Every lookup is scoped to one owning user and, where a collection id is
given, to leads already linked to that collection.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.models.collection import LeadCollection
from lead_reconciler.models.lead import Lead


class LeadRepository:
    """Repository for Lead database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    def _in_collection(self, owner_user_id: int, collection_id: int):
        return (
            select(Lead)
            .join(LeadCollection, LeadCollection.lead_id == Lead.id)
            .where(
                Lead.owner_user_id == owner_user_id,
                LeadCollection.collection_id == collection_id,
            )
        )
    
    async def get_by_id(self, owner_user_id: int, lead_id: int) -> Optional[Lead]:
        """Get a lead by ID for a specific owner."""
        result = await self.db.execute(
            select(Lead).where(
                Lead.id == lead_id,
                Lead.owner_user_id == owner_user_id,
            )
        )
        return result.scalar_one_or_none()
    
    async def find_in_collection_by_keys(
        self,
        owner_user_id: int,
        collection_id: int,
        email: Optional[str] = None,
        linkedin_url: Optional[str] = None,
        public_identifier: Optional[str] = None,
    ) -> Optional[Lead]:
        """
        Find a lead in the collection matching any present identity key.
        
        Emails are stored lowercased, so the email clause compares on the
        lowercased column to catch rows written before canonicalization.
        """
        clauses = []
        if email:
            clauses.append(func.lower(Lead.email) == email.lower())
        if linkedin_url:
            clauses.append(Lead.linkedin_url == linkedin_url)
        if public_identifier:
            clauses.append(Lead.public_identifier == public_identifier)
        
        if not clauses:
            return None
        
        result = await self.db.execute(
            self._in_collection(owner_user_id, collection_id)
            .where(or_(*clauses))
            .order_by(Lead.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()
    
    async def find_in_collection_by_name(
        self,
        owner_user_id: int,
        collection_id: int,
        first_name: str,
        last_name: str,
        company_id: Optional[int] = None,
    ) -> Optional[Lead]:
        """Find a lead in the collection by exact first + last name, narrowed by company when known."""
        conditions = [Lead.first_name == first_name, Lead.last_name == last_name]
        if company_id is not None:
            conditions.append(Lead.company_id == company_id)
        
        result = await self.db.execute(
            self._in_collection(owner_user_id, collection_id)
            .where(and_(*conditions))
            .order_by(Lead.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()
    
    async def list_in_collection(self, owner_user_id: int, collection_id: int) -> List[Lead]:
        """All leads of the collection, oldest first."""
        result = await self.db.execute(
            self._in_collection(owner_user_id, collection_id)
            .order_by(Lead.created_at.asc(), Lead.id.asc())
        )
        return list(result.scalars().all())
    
    async def list_with_email_in_collection(
        self,
        owner_user_id: int,
        collection_id: int,
        include_verified: bool = False,
    ) -> List[Lead]:
        """Leads of the collection carrying an email, optionally excluding already verified ones."""
        query = self._in_collection(owner_user_id, collection_id).where(
            Lead.email.is_not(None),
            Lead.email != "",
        )
        if not include_verified:
            query = query.where(
                or_(
                    Lead.email_verification_status.is_(None),
                    Lead.email_verification_status == "",
                )
            )
        
        result = await self.db.execute(query.order_by(Lead.id.asc()))
        return list(result.scalars().all())
    
    async def create(self, owner_user_id: int, values: Dict[str, Any]) -> Lead:
        """Create a new lead from column values."""
        lead = Lead(owner_user_id=owner_user_id, **values)
        self.db.add(lead)
        await self.db.flush()
        await self.db.refresh(lead)
        return lead
    
    async def apply_changes(self, lead: Lead, changes: Dict[str, Any]) -> Lead:
        """Write a precomputed set of column changes. Callers skip this when there are none."""
        for field, value in changes.items():
            setattr(lead, field, value)
        
        lead.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(lead)
        return lead
    
    async def set_verification(
        self,
        lead: Lead,
        status: str,
        verified_at: datetime,
        email_certainty: Optional[str] = None,
    ) -> Lead:
        """Store an email verification outcome, optionally upgrading the certainty label."""
        changes: Dict[str, Any] = {
            "email_verification_status": status,
            "email_verification_at": verified_at,
        }
        if email_certainty is not None:
            changes["email_certainty"] = email_certainty
        return await self.apply_changes(lead, changes)
