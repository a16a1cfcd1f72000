import logging
from abc import ABC, abstractmethod
from typing import Generic, NamedTuple, Sequence, TypeVar

from sqlalchemy import asc, desc, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models import Author, Book, book_authors
from schemas.shared import PageRequest, SortControl, SortDirection

logger = logging.getLogger(__name__)

E = TypeVar("E", Author, Book)


class EntitySlice(NamedTuple):
    items: Sequence
    total: int


class EntityStore(ABC, Generic[E]):
    """Persistence for one entity type on top of a request-scoped session."""

    model: type[E]
    sort_columns: dict
    default_sort: str

    def __init__(self, db: AsyncSession):
        self.db = db

    def _order_by(self, sort: Sequence[SortControl]) -> list:
        controls = list(sort) or [SortControl(sort_field=self.default_sort)]
        order_exprs = []
        for s in controls:
            col = self.sort_columns[s.sort_field]
            order_exprs.append(
                asc(col) if s.sort_direction is SortDirection.asc else desc(col)
            )
        # stable paging when sort keys tie
        order_exprs.append(self.model.id.asc())
        return order_exprs

    async def find_all(
        self, page_request: PageRequest, sort: Sequence[SortControl] = ()
    ) -> EntitySlice:
        logger.debug(
            "Fetching %s page=%s size=%s",
            self.model.__tablename__, page_request.page, page_request.size,
        )
        total = await self.db.scalar(select(func.count()).select_from(self.model))
        stmt = (
            select(self.model)
            .order_by(*self._order_by(sort))
            .offset(page_request.offset)
            .limit(page_request.size)
        )
        items = (await self.db.execute(stmt)).scalars().all()
        return EntitySlice(items, total or 0)

    async def find_by_id(self, entity_id: int) -> E | None:
        return await self.db.get(self.model, entity_id)

    @abstractmethod
    async def find_by_id_with_relations(self, entity_id: int) -> E | None:
        """Load the entity together with its related collection."""

    async def save(self, entity: E) -> E:
        self.db.add(entity)
        await self.db.commit()
        return entity

    async def delete(self, entity: E) -> None:
        await self.db.delete(entity)
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()


class AuthorStore(EntityStore[Author]):
    model = Author
    sort_columns = {
        "id": Author.id,
        "name": Author.name,
        "surname": Author.surname,
        "birthYear": Author.birth_year,
    }
    default_sort = "surname"

    async def find_by_id_with_relations(self, entity_id: int) -> Author | None:
        stmt = (
            select(Author)
            .options(selectinload(Author.books))
            .where(Author.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def exists_dependents(self, author_id: int) -> bool:
        stmt = select(exists().where(book_authors.c.author_id == author_id))
        return bool(await self.db.scalar(stmt))

    async def find_existing_ids(self, author_ids: set[int]) -> set[int]:
        if not author_ids:
            return set()
        stmt = select(Author.id).where(Author.id.in_(author_ids))
        return set((await self.db.execute(stmt)).scalars().all())


class BookStore(EntityStore[Book]):
    model = Book
    sort_columns = {
        "id": Book.id,
        "title": Book.title,
        "publisher": Book.publisher,
        "edition": Book.edition,
        "publishedDate": Book.published_date,
    }
    default_sort = "title"

    async def find_by_id_with_relations(self, entity_id: int) -> Book | None:
        stmt = (
            select(Book)
            .options(selectinload(Book.authors))
            .where(Book.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()
