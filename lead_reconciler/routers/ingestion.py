"""
Ingestion router - entry points for job-completion handlers and CSV imports.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.core.config import settings
from lead_reconciler.db.session import get_db
from lead_reconciler.errors import raise_app_error
from lead_reconciler.schemas.duplicates import DuplicateReport
from lead_reconciler.schemas.ingestion import EmailValidationRequest, IngestionSummary, IngestRequest
from lead_reconciler.services.duplicate_analysis_service import DuplicateAnalysisService
from lead_reconciler.services.email_validation_service import EmailValidationService
from lead_reconciler.services.ingestion.csv_rows import CSVParseError, parse_csv_upload
from lead_reconciler.services.lead_ingestion_service import LeadIngestionService

router = APIRouter(prefix="/collections", tags=["Ingestion"])


@router.post("/{collection_id}/ingest/{source}", response_model=IngestionSummary)
async def ingest_batch(
    collection_id: int,
    source: str,
    payload: IngestRequest,
    db: AsyncSession = Depends(get_db),
):
    """Reconcile one upstream result set into the collection."""
    service = LeadIngestionService(db)
    return await service.ingest(
        source,
        payload.records,
        payload.owner_user_id,
        collection_id,
        job=payload.job_context(),
        company_linkedin_url=payload.company_linkedin_url,
    )


@router.post("/{collection_id}/import", response_model=IngestionSummary)
async def import_csv(
    collection_id: int,
    owner_user_id: Annotated[int, Form()],
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    """Import a CSV file of leads into the collection."""
    content = await file.read(settings.CSV_IMPORT_MAX_BYTES + 1)
    if not content:
        raise_app_error(400, "CSV_EMPTY", "Uploaded file is empty")
    if len(content) > settings.CSV_IMPORT_MAX_BYTES:
        raise_app_error(
            413,
            "CSV_TOO_LARGE",
            "Uploaded file is too large",
            {"max_bytes": settings.CSV_IMPORT_MAX_BYTES},
        )

    try:
        rows = parse_csv_upload(content)
    except CSVParseError as exc:
        raise_app_error(400, "CSV_INVALID", str(exc), {"filename": file.filename})

    if not rows:
        raise_app_error(400, "CSV_EMPTY", "No data rows found in file", {"filename": file.filename})

    service = LeadIngestionService(db)
    return await service.ingest("csv", rows, owner_user_id, collection_id)


@router.post("/{collection_id}/email-validations", response_model=IngestionSummary)
async def apply_email_validations(
    collection_id: int,
    payload: EmailValidationRequest,
    db: AsyncSession = Depends(get_db),
):
    """Apply email validator results to the collection's leads."""
    service = EmailValidationService(db)
    return await service.verify_collection(
        payload.results,
        payload.owner_user_id,
        collection_id,
        force=payload.force,
        job=payload.job_context(),
    )


@router.get("/{collection_id}/duplicates", response_model=DuplicateReport)
async def collection_duplicates(
    collection_id: int,
    owner_user_id: int = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Leads sharing an email or a company within the collection."""
    service = DuplicateAnalysisService(db)
    return await service.analyze(owner_user_id, collection_id)
