"""
Company repository - database operations for Company.
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.models.company import Company


class CompanyRepository:
    """Repository for Company database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def find_matching(
        self,
        name: Optional[str] = None,
        domain: Optional[str] = None,
        website: Optional[str] = None,
        linkedin_url: Optional[str] = None,
    ) -> Optional[Company]:
        """
        Find the first company matching any of the given identity values.
        
        Each clause is included only when its value is present. Ties are
        broken by lowest id so repeated lookups return the same row.
        """
        clauses = []
        if name:
            clauses.append(Company.name == name)
        if domain:
            clauses.append(Company.domain == domain)
        if website:
            clauses.append(Company.website == website)
        if linkedin_url:
            clauses.append(Company.linkedin_url == linkedin_url)
        
        if not clauses:
            return None
        
        result = await self.db.execute(
            select(Company)
            .where(or_(*clauses))
            .order_by(Company.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()
    
    async def find_by_domain_or_websites(
        self,
        domain: str,
        websites: Sequence[str],
    ) -> Optional[Company]:
        """Find a company by normalized domain or by any of the given website spellings."""
        clauses = [Company.domain == domain]
        if websites:
            clauses.append(Company.website.in_(list(websites)))
        
        result = await self.db.execute(
            select(Company)
            .where(or_(*clauses))
            .order_by(Company.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()
    
    async def find_by_name_insensitive(self, name: str) -> Optional[Company]:
        """Find the oldest company whose name equals ``name`` ignoring case."""
        result = await self.db.execute(
            select(Company)
            .where(func.lower(Company.name) == name.lower())
            .order_by(Company.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()
    
    async def list_by_ids(self, company_ids: Sequence[int]) -> List[Company]:
        if not company_ids:
            return []
        result = await self.db.execute(
            select(Company).where(Company.id.in_(list(company_ids)))
        )
        return list(result.scalars().all())
    
    async def create(self, values: Dict[str, Any]) -> Company:
        """Create a new company from column values."""
        company = Company(**values)
        self.db.add(company)
        await self.db.flush()
        await self.db.refresh(company)
        return company
