"""
Schemas for batch ingestion requests and outcomes.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class JobContext(BaseModel):
    """Provenance of a batch, used for audit rows."""

    source_job_id: Optional[str] = None
    source_scraper_id: Optional[int] = None
    config_snapshot: Optional[Dict[str, Any]] = None

    @property
    def is_tracked(self) -> bool:
        return self.source_job_id is not None or self.source_scraper_id is not None


class RecordFailure(BaseModel):
    index: int
    reason: str


class IngestionSummary(BaseModel):
    """Outcome counts of one batch call; the four counts always sum to the input size."""

    created: int = 0
    skipped: int = 0
    errors: int = 0
    enriched: int = 0
    failures: List[RecordFailure] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.created + self.skipped + self.errors + self.enriched


class IngestRequest(BaseModel):
    owner_user_id: int
    records: List[Dict[str, Any]]
    source_job_id: Optional[str] = None
    source_scraper_id: Optional[int] = None
    company_linkedin_url: Optional[str] = None
    config_snapshot: Optional[Dict[str, Any]] = None

    def job_context(self) -> JobContext:
        return JobContext(
            source_job_id=self.source_job_id,
            source_scraper_id=self.source_scraper_id,
            config_snapshot=self.config_snapshot,
        )


class EmailValidationRequest(BaseModel):
    owner_user_id: int
    results: List[Dict[str, Any]]
    force: bool = Field(False, description="Re-apply to leads that already carry a verification status")
    source_job_id: Optional[str] = None
    source_scraper_id: Optional[int] = None

    def job_context(self) -> JobContext:
        return JobContext(source_job_id=self.source_job_id, source_scraper_id=self.source_scraper_id)
