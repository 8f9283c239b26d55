"""Collection membership linker tests."""

import pytest
from sqlalchemy import func, select

from lead_reconciler.models import Lead, LeadCollection
from lead_reconciler.repositories.collection_repository import CollectionRepository


@pytest.mark.asyncio
async def test_linking_twice_is_a_no_op(db, owner, collection):
    lead = Lead(owner_user_id=owner.id, full_name="Jane Doe")
    db.add(lead)
    await db.flush()

    repo = CollectionRepository(db)
    assert await repo.link_lead(lead.id, collection.id) is True
    assert await repo.link_lead(lead.id, collection.id) is False

    memberships = (await db.execute(select(func.count(LeadCollection.id)))).scalar_one()
    assert memberships == 1


@pytest.mark.asyncio
async def test_lead_can_join_several_collections(db, owner, collection, second_collection):
    lead = Lead(owner_user_id=owner.id, full_name="Jane Doe")
    db.add(lead)
    await db.flush()

    repo = CollectionRepository(db)
    await repo.link_lead(lead.id, collection.id)
    await repo.link_lead(lead.id, second_collection.id)

    assert await repo.get_membership(lead.id, second_collection.id) is not None


@pytest.mark.asyncio
async def test_collection_lookup_is_owner_scoped(db, owner, other_owner, collection):
    repo = CollectionRepository(db)
    assert await repo.get_for_owner(owner.id, collection.id) is not None
    assert await repo.get_for_owner(other_owner.id, collection.id) is None
