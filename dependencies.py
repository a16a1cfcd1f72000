from enum import Enum
from typing import Callable, List

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_async_db
from errors import BadRequest
from schemas.shared import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PageRequest,
    SortControl,
    SortDirection,
)
from services.author_service import AuthorManager
from services.book_service import BookManager
from storage import AuthorStore, BookStore


def get_page_request(
    page: int = Query(0, description="Zero-based page number"),
    size: int = Query(DEFAULT_PAGE_SIZE, description="Page size"),
) -> PageRequest:
    # out-of-range values are clamped rather than rejected
    if page < 0:
        page = 0
    if size < 1:
        size = DEFAULT_PAGE_SIZE
    elif size > MAX_PAGE_SIZE:
        size = MAX_PAGE_SIZE
    return PageRequest(page=page, size=size)


def make_sort_parser(field_enum: type[Enum]) -> Callable[..., List[SortControl]]:
    def parse_sort(
        sort: List[str] = Query(
            default=[], description="Sort spec like 'title:asc', 'surname:desc'"
        )
    ) -> List[SortControl]:
        result: List[SortControl] = []

        for item in sort:
            field_str, _, dir_str = item.partition(":")
            dir_str = dir_str or SortDirection.asc.value

            try:
                field = field_enum(field_str)
            except ValueError:
                raise BadRequest(f"Invalid sort field '{field_str}'")

            try:
                direction = SortDirection(dir_str.lower())
            except ValueError:
                raise BadRequest(f"Invalid sort direction '{dir_str}'")

            result.append(SortControl(sort_field=field.value, sort_direction=direction))

        return result

    return parse_sort


def get_author_manager(db: AsyncSession = Depends(get_async_db)) -> AuthorManager:
    return AuthorManager(AuthorStore(db))


def get_book_manager(db: AsyncSession = Depends(get_async_db)) -> BookManager:
    return BookManager(BookStore(db), AuthorStore(db))
