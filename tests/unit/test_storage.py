import pytest

from schemas.author import AuthorCreate
from storage import AuthorStore, EntityStore


def test_entity_store_requires_relation_loader():
    with pytest.raises(TypeError):
        EntityStore(None)


@pytest.mark.asyncio
async def test_find_existing_ids_ignores_unknown(author_manager, session):
    orwell = await author_manager.create(AuthorCreate(name="George", surname="Orwell"))
    store = AuthorStore(session)

    assert await store.find_existing_ids({orwell.id, orwell.id + 50}) == {orwell.id}
    assert await store.find_existing_ids(set()) == set()
