"""HTTP surface tests through the ASGI app."""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import select

from lead_reconciler.db import session as db_session
from lead_reconciler.db.session import get_db
from lead_reconciler.main import app
from lead_reconciler.models import Collection, Lead, User
from lead_reconciler.schemas.ingestion import JobContext
from lead_reconciler.services.lead_ingestion_service import run_ingestion_job


@pytest_asyncio.fixture
async def seeded(session_maker):
    async with session_maker() as session:
        user = User(email="api-owner@example.com")
        session.add(user)
        await session.flush()
        target = Collection(owner_user_id=user.id, name="API")
        session.add(target)
        await session.commit()
        return {"owner_id": user.id, "collection_id": target.id}


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.pop(get_db, None)


@pytest.mark.asyncio
async def test_ingest_endpoint_returns_summary(client, seeded):
    response = await client.post(
        f"/collections/{seeded['collection_id']}/ingest/leads-finder",
        json={
            "owner_user_id": seeded["owner_id"],
            "records": [
                {"full_name": "Jane Doe", "email": "jane@acme.com", "company_name": "Acme"},
                {"full_name": "Jane Doe", "email": "jane@acme.com", "company_name": "Acme"},
                {"title": "nobody"},
            ],
            "source_job_id": "run-42",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["created"] == 1
    assert body["enriched"] == 1
    assert body["skipped"] == 1
    assert body["errors"] == 0
    assert body["failures"] == []


@pytest.mark.asyncio
async def test_ingest_endpoint_rejects_unknown_source(client, seeded):
    response = await client.post(
        f"/collections/{seeded['collection_id']}/ingest/fax",
        json={"owner_user_id": seeded["owner_id"], "records": []},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "UNKNOWN_SOURCE"


@pytest.mark.asyncio
async def test_ingest_endpoint_rejects_foreign_collection(client, seeded):
    response = await client.post(
        f"/collections/{seeded['collection_id']}/ingest/profile",
        json={"owner_user_id": seeded["owner_id"] + 100, "records": [{"fullName": "X"}]},
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "COLLECTION_NOT_FOUND"


@pytest.mark.asyncio
async def test_csv_import(client, seeded):
    content = (
        "fullName,email,organizationName,validated\n"
        "Jane Doe,jane@acme.com,Acme,true\n"
        "John Roe,john@acme.com,Acme,false\n"
    ).encode("utf-8")

    response = await client.post(
        f"/collections/{seeded['collection_id']}/import",
        data={"owner_user_id": str(seeded["owner_id"])},
        files={"file": ("leads.csv", content, "text/csv")},
    )

    assert response.status_code == 200
    assert response.json()["created"] == 2


@pytest.mark.asyncio
async def test_csv_import_rejects_empty_file(client, seeded):
    response = await client.post(
        f"/collections/{seeded['collection_id']}/import",
        data={"owner_user_id": str(seeded["owner_id"])},
        files={"file": ("leads.csv", b"", "text/csv")},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CSV_EMPTY"


@pytest.mark.asyncio
async def test_csv_import_rejects_oversized_file(client, seeded, monkeypatch):
    from lead_reconciler.core.config import settings

    monkeypatch.setattr(settings, "CSV_IMPORT_MAX_BYTES", 10)
    response = await client.post(
        f"/collections/{seeded['collection_id']}/import",
        data={"owner_user_id": str(seeded["owner_id"])},
        files={"file": ("leads.csv", b"fullName\nJane Doe\n", "text/csv")},
    )
    assert response.status_code == 413
    assert response.json()["error"]["code"] == "CSV_TOO_LARGE"


@pytest.mark.asyncio
async def test_email_validation_and_duplicates_endpoints(client, seeded):
    collection_id = seeded["collection_id"]
    owner_id = seeded["owner_id"]

    await client.post(
        f"/collections/{collection_id}/ingest/profile",
        json={
            "owner_user_id": owner_id,
            "records": [
                {"fullName": "Jane Doe", "email": "jane@acme.com", "orgName": "Acme"},
                {"fullName": "John Roe", "email": "john@acme.com", "orgName": "Acme"},
            ],
        },
    )

    response = await client.post(
        f"/collections/{collection_id}/email-validations",
        json={
            "owner_user_id": owner_id,
            "results": [
                {"email": "jane@acme.com", "email_result": "valid"},
                {"email": "ghost@acme.com", "email_result": "valid"},
            ],
        },
    )
    assert response.status_code == 200
    assert response.json()["enriched"] == 1
    assert response.json()["skipped"] == 1

    response = await client.get(
        f"/collections/{collection_id}/duplicates",
        params={"owner_user_id": owner_id},
    )
    assert response.status_code == 200
    report = response.json()
    assert report["total_leads"] == 2
    assert report["by_email"]["groups_count"] == 0
    assert report["by_company"]["groups_count"] == 1
    assert report["by_company"]["groups"][0]["company_name"] == "Acme"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["api_ok"] is True
    assert body["db_ok"] is True


@pytest.mark.asyncio
async def test_job_handler_commits_its_own_batch(seeded, session_maker, monkeypatch):
    monkeypatch.setattr(db_session, "async_session_maker", session_maker)

    summary = await run_ingestion_job(
        "profile",
        [{"firstName": "Ada", "lastName": "Lovelace", "email": "ada@engines.io"}],
        seeded["owner_id"],
        seeded["collection_id"],
        job=JobContext(source_job_id="job-7"),
    )

    assert summary.created == 1
    async with session_maker() as session:
        lead = await session.scalar(select(Lead).where(Lead.email == "ada@engines.io"))
        assert lead is not None
        assert lead.full_name == "Ada Lovelace"
