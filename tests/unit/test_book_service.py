import datetime

import pytest
from sqlalchemy import text

from errors import NotFound
from schemas.author import AuthorCreate
from schemas.book import BookCreate, BookUpdate
from schemas.shared import PageRequest


async def _author(manager, name="George", surname="Orwell"):
    return await manager.create(AuthorCreate(name=name, surname=surname))


@pytest.mark.asyncio
async def test_create_with_single_valid_author(author_manager, book_manager):
    orwell = await _author(author_manager)

    book = await book_manager.create(
        BookCreate(
            title="1984",
            author_ids={orwell.id},
            publisher="Secker & Warburg",
            edition="1st",
            published_date=datetime.date(1949, 6, 8),
        )
    )

    assert book.id is not None
    assert [a.id for a in book.authors] == [orwell.id]
    assert book.authors[0].full_name == "George Orwell"
    assert book.published_date == datetime.date(1949, 6, 8)


@pytest.mark.asyncio
async def test_create_with_only_unknown_author_fails(book_manager):
    with pytest.raises(NotFound) as exc_info:
        await book_manager.create(BookCreate(title="Ghost", author_ids={404}))

    assert exc_info.value.key_name == "id"
    assert exc_info.value.key_value == 404
    page = await book_manager.list(PageRequest())
    assert page.total_elements == 0


@pytest.mark.asyncio
async def test_create_with_several_unknown_authors_names_them_all(book_manager):
    with pytest.raises(NotFound) as exc_info:
        await book_manager.create(BookCreate(title="Ghost", author_ids={405, 404}))

    assert exc_info.value.key_name == "ids"
    assert exc_info.value.key_value == [404, 405]
    assert str(exc_info.value) == "Author not found with ids: [404, 405]"


@pytest.mark.asyncio
async def test_create_drops_unknown_author_when_another_resolves(author_manager, book_manager):
    orwell = await _author(author_manager)

    book = await book_manager.create(
        BookCreate(title="1984", author_ids={orwell.id, 9999})
    )

    assert [a.id for a in book.authors] == [orwell.id]


@pytest.mark.asyncio
async def test_create_without_authors(book_manager):
    book = await book_manager.create(BookCreate(title="Anonymous"))

    assert book.authors == []


@pytest.mark.asyncio
async def test_get_missing_book_raises_not_found(book_manager):
    with pytest.raises(NotFound) as exc_info:
        await book_manager.get(1)
    assert exc_info.value.entity == "Book"


@pytest.mark.asyncio
async def test_update_with_empty_author_ids_clears_authors(author_manager, book_manager):
    orwell = await _author(author_manager)
    book = await book_manager.create(BookCreate(title="1984", author_ids={orwell.id}))

    updated = await book_manager.update(book.id, BookUpdate(author_ids=set()))

    assert updated.authors == []
    assert (await book_manager.get(book.id)).authors == []


@pytest.mark.asyncio
async def test_update_without_author_ids_keeps_authors(author_manager, book_manager):
    orwell = await _author(author_manager)
    book = await book_manager.create(BookCreate(title="1984", author_ids={orwell.id}))

    updated = await book_manager.update(
        book.id, BookUpdate(title="Nineteen Eighty-Four", publisher="Penguin")
    )

    assert updated.title == "Nineteen Eighty-Four"
    assert updated.publisher == "Penguin"
    assert [a.id for a in updated.authors] == [orwell.id]


@pytest.mark.asyncio
async def test_update_replaces_author_set(author_manager, book_manager):
    orwell = await _author(author_manager)
    huxley = await _author(author_manager, "Aldous", "Huxley")
    book = await book_manager.create(BookCreate(title="Dystopias", author_ids={orwell.id}))

    updated = await book_manager.update(
        book.id, BookUpdate(author_ids={huxley.id, 31337})
    )

    assert [a.id for a in updated.authors] == [huxley.id]


@pytest.mark.asyncio
async def test_update_with_only_unknown_authors_leaves_book_untouched(
    author_manager, book_manager
):
    orwell = await _author(author_manager)
    book = await book_manager.create(BookCreate(title="1984", author_ids={orwell.id}))

    with pytest.raises(NotFound):
        await book_manager.update(book.id, BookUpdate(title="Changed", author_ids={404}))

    current = await book_manager.get(book.id)
    assert current.title == "1984"
    assert [a.id for a in current.authors] == [orwell.id]


@pytest.mark.asyncio
async def test_update_missing_book_raises_not_found(book_manager):
    with pytest.raises(NotFound):
        await book_manager.update(77, BookUpdate(title="Nope"))


@pytest.mark.asyncio
async def test_delete_book_then_author_can_be_deleted(author_manager, book_manager):
    orwell = await _author(author_manager)
    book = await book_manager.create(BookCreate(title="1984", author_ids={orwell.id}))

    await book_manager.delete(book.id)
    await author_manager.delete(orwell.id)

    with pytest.raises(NotFound):
        await book_manager.get(book.id)
    with pytest.raises(NotFound):
        await author_manager.get(orwell.id)


@pytest.mark.asyncio
async def test_list_sorted_by_title(book_manager):
    for title in ("Brave New World", "Animal Farm", "Crime and Punishment"):
        await book_manager.create(BookCreate(title=title))

    page = await book_manager.list(PageRequest(page=0, size=2))

    assert [b.title for b in page.content] == ["Animal Farm", "Brave New World"]
    assert page.total_elements == 3
    assert page.total_pages == 2
    assert page.first and not page.last


def _delete_author_after_resolution(monkeypatch, book_manager, session, author_id):
    resolve = book_manager.resolve_authors

    async def _resolve_then_delete(author_ids):
        authors = await resolve(author_ids)
        await session.execute(text("DELETE FROM authors WHERE id = :id"), {"id": author_id})
        await session.commit()
        return authors

    monkeypatch.setattr(book_manager, "resolve_authors", _resolve_then_delete)


@pytest.mark.asyncio
async def test_create_reports_author_deleted_before_save(
    monkeypatch, author_manager, book_manager, session
):
    orwell = await _author(author_manager)
    _delete_author_after_resolution(monkeypatch, book_manager, session, orwell.id)

    with pytest.raises(NotFound) as exc_info:
        await book_manager.create(BookCreate(title="1984", author_ids={orwell.id}))

    assert exc_info.value.key_name == "id"
    assert exc_info.value.key_value == orwell.id
    page = await book_manager.list(PageRequest())
    assert page.total_elements == 0


@pytest.mark.asyncio
async def test_update_reports_author_deleted_before_save(
    monkeypatch, author_manager, book_manager, session
):
    orwell = await _author(author_manager)
    huxley = await _author(author_manager, "Aldous", "Huxley")
    book = await book_manager.create(BookCreate(title="Dystopias", author_ids={orwell.id}))
    _delete_author_after_resolution(monkeypatch, book_manager, session, huxley.id)

    with pytest.raises(NotFound) as exc_info:
        await book_manager.update(
            book.id, BookUpdate(title="X", author_ids={orwell.id, huxley.id})
        )

    assert exc_info.value.key_value == huxley.id
    current = await book_manager.get(book.id)
    assert current.title == "Dystopias"
    assert [a.id for a in current.authors] == [orwell.id]
