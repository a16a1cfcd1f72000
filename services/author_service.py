import logging
from typing import List, Sequence

from sqlalchemy.exc import IntegrityError

import mappers
from errors import HasDependents, NotFound
from models import Author
from schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from schemas.shared import AuthorSummary, BookSummary, Page, PageRequest, SortControl
from storage import AuthorStore

logger = logging.getLogger(__name__)


async def find_author_or_raise(store: AuthorStore, author_id: int, with_relations: bool = False) -> Author:
    if with_relations:
        author = await store.find_by_id_with_relations(author_id)
    else:
        author = await store.find_by_id(author_id)
    if author is None:
        logger.debug("Author lookup missed", extra={"author_id": author_id})
        raise NotFound("Author", "id", author_id)
    return author


class AuthorManager:
    def __init__(self, store: AuthorStore):
        self.store = store

    async def list(
        self, page_request: PageRequest, sort: Sequence[SortControl] = ()
    ) -> Page[AuthorSummary]:
        authors, total = await self.store.find_all(page_request, sort)
        return Page[AuthorSummary].build(
            [mappers.to_author_summary(a) for a in authors], page_request, total
        )

    async def get(self, author_id: int) -> AuthorRead:
        return mappers.to_author_read(await find_author_or_raise(self.store, author_id))

    async def list_books(self, author_id: int) -> List[BookSummary]:
        author = await find_author_or_raise(self.store, author_id, with_relations=True)
        return [mappers.to_book_summary(b) for b in author.books]

    async def create(self, request: AuthorCreate) -> AuthorRead:
        author = await self.store.save(mappers.to_author_entity(request))
        logger.info("Created author", extra={"author_id": author.id})
        return mappers.to_author_read(author)

    async def update(self, author_id: int, request: AuthorUpdate) -> AuthorRead:
        author = await find_author_or_raise(self.store, author_id)
        mappers.apply_author_update(author, request)
        author = await self.store.save(author)
        logger.info("Updated author", extra={"author_id": author_id})
        return mappers.to_author_read(author)

    async def delete(self, author_id: int) -> None:
        author = await find_author_or_raise(self.store, author_id)

        if await self.store.exists_dependents(author_id):
            logger.warning(
                "Refusing to delete author with associated books",
                extra={"author_id": author_id},
            )
            raise HasDependents(author_id)

        try:
            await self.store.delete(author)
        except IntegrityError:
            # a book was linked between the check and the delete; the FK refused it
            await self.store.rollback()
            logger.warning(
                "Author delete rejected by foreign key",
                extra={"author_id": author_id},
            )
            raise HasDependents(author_id)
        logger.info("Deleted author", extra={"author_id": author_id})
