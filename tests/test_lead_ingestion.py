"""End-to-end ingestion tests against a SQLite database."""

import pytest
from sqlalchemy import func, select

from lead_reconciler.errors import AppError
from lead_reconciler.models import Collection, Company, EntityScraperUsage, Lead, LeadCollection
from lead_reconciler.schemas.ingestion import JobContext
from lead_reconciler.services.lead_ingestion_service import LeadIngestionService


async def count(db, column) -> int:
    return (await db.execute(select(func.count(column)))).scalar_one()


async def leads_in(db, collection_id):
    result = await db.execute(
        select(Lead)
        .join(LeadCollection, LeadCollection.lead_id == Lead.id)
        .where(LeadCollection.collection_id == collection_id)
        .order_by(Lead.id)
    )
    return list(result.scalars().all())


PROFILE_RECORDS = [
    {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@acme.com",
        "emailCertainty": "sure",
        "orgName": "Acme",
        "orgWebsite": "https://acme.com",
    },
    {
        "firstName": "John",
        "lastName": "Roe",
        "email": "john@acme.com",
        "orgName": "Acme",
        "orgDomain": "acme.com",
    },
]


@pytest.mark.asyncio
async def test_profile_batch_creates_leads_and_one_company(db, owner, collection):
    service = LeadIngestionService(db)
    summary = await service.ingest("profile", PROFILE_RECORDS, owner.id, collection.id)

    assert (summary.created, summary.enriched, summary.skipped, summary.errors) == (2, 0, 0, 0)
    assert await count(db, Company.id) == 1
    leads = await leads_in(db, collection.id)
    assert [lead.email for lead in leads] == ["jane@acme.com", "john@acme.com"]
    assert leads[0].company_id == leads[1].company_id
    assert leads[0].full_name == "Jane Doe"


@pytest.mark.asyncio
async def test_reingesting_the_same_batch_is_idempotent(db, owner, collection):
    service = LeadIngestionService(db)
    await service.ingest("profile", PROFILE_RECORDS, owner.id, collection.id)
    lead_count = await count(db, Lead.id)
    company_count = await count(db, Company.id)
    membership_count = await count(db, LeadCollection.id)

    summary = await service.ingest("profile", PROFILE_RECORDS, owner.id, collection.id)

    assert summary.created == 0
    assert summary.enriched == len(PROFILE_RECORDS)
    assert await count(db, Lead.id) == lead_count
    assert await count(db, Company.id) == company_count
    assert await count(db, LeadCollection.id) == membership_count


@pytest.mark.asyncio
async def test_same_email_with_higher_certainty_upgrades_and_fills(db, owner, collection):
    service = LeadIngestionService(db)
    await service.ingest(
        "profile",
        [{"fullName": "Jane Doe", "email": "jane@acme.com", "emailCertainty": "sure"}],
        owner.id,
        collection.id,
    )
    summary = await service.ingest(
        "profile",
        [
            {
                "fullName": "Jane Doe",
                "email": "jane@acme.com",
                "emailCertainty": "ultra_sure",
                "linkedinUrl": "https://linkedin.com/in/jane",
            }
        ],
        owner.id,
        collection.id,
    )

    assert summary.enriched == 1
    leads = await leads_in(db, collection.id)
    assert len(leads) == 1
    assert leads[0].email == "jane@acme.com"
    assert leads[0].email_certainty == "ultra_sure"
    assert leads[0].linkedin_url == "https://linkedin.com/in/jane"


@pytest.mark.asyncio
async def test_less_certain_email_does_not_replace_stored_one(db, owner, collection):
    service = LeadIngestionService(db)
    await service.ingest(
        "leads-finder",
        [{"full_name": "Jane Doe", "linkedin": "https://linkedin.com/in/jane", "email": "a@x.com", "email_certainty": "ultra_sure"}],
        owner.id,
        collection.id,
    )
    await service.ingest(
        "leads-finder",
        [{"full_name": "Jane Doe", "linkedin": "https://linkedin.com/in/jane", "email": "b@x.com", "email_certainty": "sure", "city": "Paris"}],
        owner.id,
        collection.id,
    )

    (lead,) = await leads_in(db, collection.id)
    assert lead.email == "a@x.com"
    assert lead.email_certainty == "ultra_sure"
    assert lead.city == "Paris"


@pytest.mark.asyncio
async def test_employee_then_profile_share_one_company(db, owner, collection):
    service = LeadIngestionService(db)
    await service.ingest(
        "company-employees",
        [
            {
                "linkedinUrl": "https://linkedin.com/in/jane",
                "firstName": "Jane",
                "lastName": "Doe",
                "currentPosition": [{"companyName": "Acme", "position": "CTO"}],
            }
        ],
        owner.id,
        collection.id,
        company_linkedin_url="https://linkedin.com/company/acme",
    )
    await service.ingest(
        "profile",
        [{"fullName": "John Roe", "email": "john@acme.com", "orgName": "Acme", "orgDomain": "acme.com"}],
        owner.id,
        collection.id,
    )

    companies = (await db.execute(select(Company))).scalars().all()
    assert len(companies) == 1
    assert companies[0].name == "Acme"
    assert companies[0].linkedin_url == "https://linkedin.com/company/acme"


@pytest.mark.asyncio
async def test_leads_are_scoped_per_collection(db, owner, collection, second_collection):
    service = LeadIngestionService(db)
    record = [{"fullName": "Jane Doe", "email": "jane@acme.com"}]

    await service.ingest("profile", record, owner.id, collection.id)
    summary = await service.ingest("profile", record, owner.id, second_collection.id)

    assert summary.created == 1
    assert await count(db, Lead.id) == 2


@pytest.mark.asyncio
async def test_records_without_identity_are_skipped(db, owner, collection):
    service = LeadIngestionService(db)
    summary = await service.ingest(
        "profile",
        [{"position": "CTO", "orgName": "Ghost Corp"}, {"fullName": "Jane Doe"}],
        owner.id,
        collection.id,
    )

    assert summary.skipped == 2
    assert summary.created == 0
    assert await count(db, Company.id) == 0


@pytest.mark.asyncio
async def test_name_only_record_is_skipped_on_every_run(db, owner, collection):
    service = LeadIngestionService(db)
    record = [{"firstName": "Jane", "lastName": "Doe", "orgName": "Acme"}]

    first = await service.ingest("profile", record, owner.id, collection.id)
    second = await service.ingest("profile", record, owner.id, collection.id)

    assert (first.created, first.skipped) == (0, 1)
    assert (second.created, second.skipped) == (0, 1)
    assert await count(db, Lead.id) == 0


@pytest.mark.asyncio
async def test_bad_record_is_counted_and_batch_continues(db, owner, collection):
    service = LeadIngestionService(db)
    records = [
        {"fullName": "Jane Doe", "email": "jane@acme.com"},
        "not-a-record",
        {"fullName": "John Roe", "email": "john@acme.com"},
    ]
    summary = await service.ingest("profile", records, owner.id, collection.id)

    assert (summary.created, summary.errors) == (2, 1)
    assert summary.failures[0].index == 1
    assert "TypeError" in summary.failures[0].reason
    assert summary.processed == len(records)


@pytest.mark.asyncio
async def test_unparsable_nested_field_does_not_fail_the_record(db, owner, collection):
    service = LeadIngestionService(db)
    summary = await service.ingest(
        "profile",
        [{"email": "a@x.com", "linkedinUrl": "[" * 5000}],
        owner.id,
        collection.id,
    )

    assert (summary.created, summary.errors) == (1, 0)
    assert summary.failures == []


@pytest.mark.asyncio
async def test_failed_record_rolls_back_only_its_own_writes(db, owner, collection, monkeypatch):
    service = LeadIngestionService(db)
    original = service.leads.create_and_link

    async def fail_for_john(fragment, *args, **kwargs):
        if fragment.email == "john@acme.com":
            raise RuntimeError("store unavailable")
        return await original(fragment, *args, **kwargs)

    monkeypatch.setattr(service.leads, "create_and_link", fail_for_john)
    summary = await service.ingest(
        "profile",
        [
            {"fullName": "Jane Doe", "email": "jane@acme.com"},
            {"fullName": "John Roe", "email": "john@acme.com", "orgName": "Roe Industries"},
        ],
        owner.id,
        collection.id,
    )

    assert (summary.created, summary.errors) == (1, 1)
    assert await count(db, Lead.id) == 1
    assert await count(db, Company.id) == 0


@pytest.mark.asyncio
async def test_email_finder_uses_domain_and_name_fallback(db, owner, collection):
    service = LeadIngestionService(db)
    await service.ingest(
        "company-employees",
        [
            {
                "linkedinUrl": "https://linkedin.com/in/jane",
                "firstName": "Jane",
                "lastName": "Doe",
                "currentPosition": [{"companyName": "Acme"}],
            }
        ],
        owner.id,
        collection.id,
    )

    summary = await service.ingest(
        "email-finder",
        [
            {"firstName": "Jane", "lastName": "Doe", "domain": "acme.com", "email": "jane@acme.com", "status": "FOUND", "certainty": "sure"},
            {"firstName": "Max", "lastName": "Lost", "domain": "acme.com", "status": "NOT_FOUND"},
            {"firstName": "Ann", "lastName": "New", "domain": "acme.com", "email": "ann@acme.com", "status": "FOUND"},
        ],
        owner.id,
        collection.id,
    )

    assert (summary.enriched, summary.skipped, summary.created) == (1, 1, 1)
    leads = await leads_in(db, collection.id)
    jane = next(lead for lead in leads if lead.first_name == "Jane")
    assert jane.email == "jane@acme.com"
    assert jane.email_certainty == "sure"

    company = (await db.execute(select(Company))).scalar_one()
    assert company.name == "Acme"
    assert jane.company_id == company.id
    ann = next(lead for lead in leads if lead.first_name == "Ann")
    assert ann.company_id == company.id


@pytest.mark.asyncio
async def test_email_finder_creates_company_from_domain(db, owner, collection):
    summary = await LeadIngestionService(db).ingest(
        "email-finder",
        [{"firstName": "Ann", "lastName": "New", "domain": "www.bricks.co", "email": "ann@bricks.co", "status": "FOUND"}],
        owner.id,
        collection.id,
    )

    assert summary.created == 1
    company = (await db.execute(select(Company))).scalar_one()
    assert company.name == "Bricks"
    assert company.domain == "bricks.co"
    assert company.website == "https://bricks.co"


@pytest.mark.asyncio
async def test_usage_rows_written_for_tracked_batches(db, owner, collection):
    service = LeadIngestionService(db)
    job = JobContext(source_job_id="run-1", source_scraper_id=3, config_snapshot={"limit": 10})

    await service.ingest("profile", PROFILE_RECORDS, owner.id, collection.id, job=job)
    usages = (await db.execute(select(EntityScraperUsage))).scalars().all()

    assert len(usages) == 2
    assert {usage.source_tag for usage in usages} == {"profile"}
    assert all(usage.succeeded and usage.item_count == 1 for usage in usages)
    assert usages[0].config_snapshot == {"limit": 10}

    leads = await leads_in(db, collection.id)
    assert all(lead.source_scraper_id == 3 for lead in leads)


@pytest.mark.asyncio
async def test_untracked_batches_write_no_usage(db, owner, collection):
    await LeadIngestionService(db).ingest("profile", PROFILE_RECORDS, owner.id, collection.id)
    assert await count(db, EntityScraperUsage.id) == 0


@pytest.mark.asyncio
async def test_foreign_collection_aborts_before_any_write(db, owner, other_owner):
    foreign = Collection(owner_user_id=other_owner.id, name="Not yours")
    db.add(foreign)
    await db.flush()

    with pytest.raises(AppError) as exc_info:
        await LeadIngestionService(db).ingest("profile", PROFILE_RECORDS, owner.id, foreign.id)

    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "COLLECTION_NOT_FOUND"
    assert await count(db, Lead.id) == 0


@pytest.mark.asyncio
async def test_unknown_source_is_rejected(db, owner, collection):
    with pytest.raises(AppError) as exc_info:
        await LeadIngestionService(db).ingest("fax", [], owner.id, collection.id)
    assert exc_info.value.code == "UNKNOWN_SOURCE"


@pytest.mark.asyncio
async def test_oversized_batch_is_rejected(db, owner, collection, monkeypatch):
    from lead_reconciler.core.config import settings

    monkeypatch.setattr(settings, "INGEST_MAX_RECORDS", 1)
    with pytest.raises(AppError) as exc_info:
        await LeadIngestionService(db).ingest("profile", PROFILE_RECORDS, owner.id, collection.id)
    assert exc_info.value.status_code == 413
