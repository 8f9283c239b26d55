"""
Repositories package - every query the services run lives here.
"""

from lead_reconciler.repositories.collection_repository import CollectionRepository
from lead_reconciler.repositories.company_repository import CompanyRepository
from lead_reconciler.repositories.lead_repository import LeadRepository
from lead_reconciler.repositories.scraper_usage_repository import ScraperUsageRepository

__all__ = [
    "CollectionRepository",
    "CompanyRepository",
    "LeadRepository",
    "ScraperUsageRepository",
]
