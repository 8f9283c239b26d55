"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from lead_reconciler.models.user import User
from lead_reconciler.models.company import Company
from lead_reconciler.models.collection import Collection, LeadCollection
from lead_reconciler.models.lead import Lead
from lead_reconciler.models.entity_scraper_usage import EntityScraperUsage

# Export all models
__all__ = [
    "User",
    "Company",
    "Collection",
    "LeadCollection",
    "Lead",
    "EntityScraperUsage",
]
