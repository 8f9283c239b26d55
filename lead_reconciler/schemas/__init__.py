"""
Schemas package.

Import all schemas here for easy access.
"""

from lead_reconciler.schemas.fragments import CompanyFragment, PersonFragment, RecordFragments
from lead_reconciler.schemas.ingestion import (
    EmailValidationRequest,
    IngestionSummary,
    IngestRequest,
    JobContext,
    RecordFailure,
)
from lead_reconciler.schemas.duplicates import DuplicateReport

__all__ = [
    "CompanyFragment",
    "PersonFragment",
    "RecordFragments",
    "EmailValidationRequest",
    "IngestionSummary",
    "IngestRequest",
    "JobContext",
    "RecordFailure",
    "DuplicateReport",
]
