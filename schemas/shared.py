from datetime import datetime
from enum import Enum
from math import ceil
from typing import Generic, List, TypeVar

from pydantic import BaseModel, conint
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# ids are 64-bit signed integers in storage
ID_MAX = 2**63 - 1
EntityId = conint(ge=1, le=ID_MAX)


class CatalogModel(BaseModel):
    """Base for transport models: camelCase on the wire, snake_case in Python."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"


class SortControl(BaseModel):
    sort_field: str
    sort_direction: SortDirection = SortDirection.asc


class PageRequest(BaseModel):
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(CatalogModel, Generic[T]):
    content: List[T]
    page_number: int
    page_size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def build(cls, content: List[T], request: PageRequest, total: int) -> "Page[T]":
        total_pages = ceil(total / request.size) if total else 0
        return cls(
            content=content,
            page_number=request.page,
            page_size=request.size,
            total_elements=total,
            total_pages=total_pages,
            first=request.page == 0,
            last=request.page + 1 >= total_pages,
        )


class FieldError(CatalogModel):
    field: str
    message: str


class ErrorResponse(CatalogModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    field_errors: List[FieldError] | None = None


class AuthorSummary(CatalogModel):
    id: int
    full_name: str


class BookSummary(CatalogModel):
    id: int
    title: str
    publisher: str | None = None
