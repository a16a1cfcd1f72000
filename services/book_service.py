import logging
from typing import Sequence

from sqlalchemy.exc import IntegrityError

import mappers
from errors import NotFound
from models import Author, Book
from schemas.book import BookCreate, BookRead, BookUpdate
from schemas.shared import BookSummary, Page, PageRequest, SortControl
from storage import AuthorStore, BookStore

logger = logging.getLogger(__name__)


def author_not_found(author_ids: set[int]) -> NotFound:
    # a single id is reported by itself, several ids together
    if len(author_ids) == 1:
        return NotFound("Author", "id", next(iter(author_ids)))
    return NotFound("Author", "ids", author_ids)


class BookManager:
    def __init__(self, store: BookStore, author_store: AuthorStore):
        self.store = store
        self.author_store = author_store

    async def _find_book(self, book_id: int) -> Book:
        book = await self.store.find_by_id_with_relations(book_id)
        if book is None:
            logger.debug("Book lookup missed", extra={"book_id": book_id})
            raise NotFound("Book", "id", book_id)
        return book

    async def _fetch_authors(self, author_ids: set[int]) -> list[Author]:
        authors: list[Author] = []
        for author_id in sorted(author_ids):
            author = await self.author_store.find_by_id(author_id)
            if author is None:
                logger.warning(
                    "Author with id %s not found, skipping", author_id,
                    extra={"author_id": author_id},
                )
                continue
            authors.append(author)
        return authors

    async def resolve_authors(self, author_ids: set[int]) -> list[Author]:
        """Look up ``author_ids``, dropping the ones that do not exist.

        Unknown ids are tolerated as long as at least one id resolves. When
        none does, the request is rejected: a single id is reported by itself,
        several ids are reported together. An empty request resolves to no
        authors.
        """
        authors = await self._fetch_authors(author_ids)
        if author_ids and not authors:
            raise author_not_found(author_ids)
        if len(authors) < len(author_ids):
            logger.warning(
                "Resolved %d of %d requested authors", len(authors), len(author_ids),
                extra={
                    "requested_ids": sorted(author_ids),
                    "resolved_ids": [a.id for a in authors],
                },
            )
        return authors

    async def _save_linked(self, book: Book, authors: list[Author] | None) -> Book:
        """Persist ``book``; an author removed since resolution is reported as missing."""
        linked_ids = {a.id for a in authors} if authors else set()
        try:
            return await self.store.save(book)
        except IntegrityError:
            await self.store.rollback()
            missing = linked_ids - await self.author_store.find_existing_ids(linked_ids)
            if not missing:
                raise
            logger.warning(
                "Authors removed before the book was saved",
                extra={"missing_ids": sorted(missing)},
            )
            raise author_not_found(missing)

    async def list(
        self, page_request: PageRequest, sort: Sequence[SortControl] = ()
    ) -> Page[BookSummary]:
        books, total = await self.store.find_all(page_request, sort)
        return Page[BookSummary].build(
            [mappers.to_book_summary(b) for b in books], page_request, total
        )

    async def get(self, book_id: int) -> BookRead:
        return mappers.to_book_read(await self._find_book(book_id))

    async def create(self, request: BookCreate) -> BookRead:
        if not request.author_ids:
            logger.info("No authors provided, creating book without authors")
        authors = await self.resolve_authors(request.author_ids)

        book = mappers.to_book_entity(request)
        book.authors = authors
        book = await self._save_linked(book, authors)
        logger.info("Created book", extra={"book_id": book.id})
        return mappers.to_book_read(book)

    async def update(self, book_id: int, request: BookUpdate) -> BookRead:
        book = await self._find_book(book_id)

        # resolve before touching the book so a rejected author set changes nothing
        authors = None
        if request.author_ids is not None:
            if request.author_ids:
                authors = await self.resolve_authors(request.author_ids)
            else:
                logger.info("Empty author list provided, clearing authors", extra={"book_id": book_id})
                authors = []

        mappers.apply_book_update(book, request)
        if authors is not None:
            book.authors = authors

        book = await self._save_linked(book, authors)
        logger.info("Updated book", extra={"book_id": book_id})
        return mappers.to_book_read(book)

    async def delete(self, book_id: int) -> None:
        book = await self._find_book(book_id)
        await self.store.delete(book)
        logger.info("Deleted book", extra={"book_id": book_id})
