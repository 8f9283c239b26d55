"""
Read-only duplicate analysis for one collection.
"""

from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.repositories.company_repository import CompanyRepository
from lead_reconciler.repositories.lead_repository import LeadRepository
from lead_reconciler.schemas.duplicates import (
    CompanyDuplicateGroup,
    CompanyDuplicateStats,
    DuplicateReport,
    EmailDuplicateGroup,
    EmailDuplicateStats,
)
from lead_reconciler.services.lead_ingestion_service import ensure_collection
from lead_reconciler.utils.normalize import normalize_email


class DuplicateAnalysisService:
    """Groups a collection's leads by email and by company."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.leads = LeadRepository(db)
        self.companies = CompanyRepository(db)

    async def analyze(self, owner_user_id: int, collection_id: int) -> DuplicateReport:
        await ensure_collection(self.db, owner_user_id, collection_id)
        leads = await self.leads.list_in_collection(owner_user_id, collection_id)

        by_email: Dict[str, List[int]] = {}
        by_company: Dict[int, List[int]] = {}
        for lead in leads:
            email = normalize_email(lead.email)
            if email:
                by_email.setdefault(email, []).append(lead.id)
            if lead.company_id is not None:
                by_company.setdefault(lead.company_id, []).append(lead.id)

        email_groups = [
            EmailDuplicateGroup(email=email, lead_ids=ids, count=len(ids))
            for email, ids in by_email.items()
            if len(ids) > 1
        ]

        duplicated_company_ids = [cid for cid, ids in by_company.items() if len(ids) > 1]
        names = {
            company.id: company.name
            for company in await self.companies.list_by_ids(duplicated_company_ids)
        }
        company_groups = [
            CompanyDuplicateGroup(
                company_id=cid,
                company_name=names.get(cid),
                lead_ids=by_company[cid],
                count=len(by_company[cid]),
            )
            for cid in duplicated_company_ids
        ]

        return DuplicateReport(
            by_email=EmailDuplicateStats(
                groups_count=len(email_groups),
                total_duplicates=sum(group.count - 1 for group in email_groups),
                groups=email_groups,
            ),
            by_company=CompanyDuplicateStats(
                groups_count=len(company_groups),
                total_duplicates=sum(group.count - 1 for group in company_groups),
                groups=company_groups,
            ),
            total_leads=len(leads),
        )
