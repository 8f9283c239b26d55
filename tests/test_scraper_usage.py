"""Usage recorder tests: audit writes are best-effort."""

import pytest
from sqlalchemy import func, select

from lead_reconciler.models import EntityScraperUsage, Lead
from lead_reconciler.services.scraper_usage_service import ENTITY_LEAD, ScraperUsageService


@pytest.mark.asyncio
async def test_record_writes_row(db, owner):
    recorder = ScraperUsageService(db, enabled=True)
    written = await recorder.record(
        entity_type=ENTITY_LEAD,
        entity_id=12,
        source_tag="profile",
        succeeded=True,
        item_count=1,
        owner_user_id=owner.id,
        scraper_id=4,
        source_job_id="run-9",
    )

    assert written is True
    usage = (await db.execute(select(EntityScraperUsage))).scalar_one()
    assert (usage.entity_id, usage.scraper_id, usage.source_job_id) == (12, 4, "run-9")


@pytest.mark.asyncio
async def test_failure_is_swallowed_and_keeps_surrounding_work(db, owner, monkeypatch):
    lead = Lead(owner_user_id=owner.id, full_name="Jane Doe")
    db.add(lead)
    await db.flush()

    recorder = ScraperUsageService(db, enabled=True)

    async def broken_create(**kwargs):
        raise RuntimeError("audit table unavailable")

    monkeypatch.setattr(recorder.repo, "create", broken_create)
    written = await recorder.record(ENTITY_LEAD, lead.id, "profile", True, 1, owner.id)

    assert written is False
    assert (await db.execute(select(func.count(Lead.id)))).scalar_one() == 1


@pytest.mark.asyncio
async def test_disabled_recorder_writes_nothing(db, owner):
    recorder = ScraperUsageService(db, enabled=False)
    assert await recorder.record(ENTITY_LEAD, 1, "profile", True, 1, owner.id) is False
    assert (await db.execute(select(func.count(EntityScraperUsage.id)))).scalar_one() == 0
