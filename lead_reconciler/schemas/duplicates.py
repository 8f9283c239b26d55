"""
Schemas for collection duplicate analysis.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class EmailDuplicateGroup(BaseModel):
    email: str
    lead_ids: List[int]
    count: int


class CompanyDuplicateGroup(BaseModel):
    company_id: int
    company_name: Optional[str] = None
    lead_ids: List[int]
    count: int


class EmailDuplicateStats(BaseModel):
    groups_count: int = 0
    total_duplicates: int = 0
    groups: List[EmailDuplicateGroup] = Field(default_factory=list)


class CompanyDuplicateStats(BaseModel):
    groups_count: int = 0
    total_duplicates: int = 0
    groups: List[CompanyDuplicateGroup] = Field(default_factory=list)


class DuplicateReport(BaseModel):
    by_email: EmailDuplicateStats
    by_company: CompanyDuplicateStats
    total_leads: int
