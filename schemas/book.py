from datetime import date
from enum import Enum
from typing import List

from pydantic import Field, field_validator
from .shared import AuthorSummary, CatalogModel, EntityId


class BookSortField(str, Enum):
    id = "id"
    title = "title"
    publisher = "publisher"
    edition = "edition"
    published_date = "publishedDate"


def _not_in_future(value: date | None) -> date | None:
    if value is not None and value > date.today():
        raise ValueError("Published date cannot be in the future")
    return value


class BookCreate(CatalogModel):
    title: str = Field(..., min_length=1, max_length=255)
    author_ids: set[EntityId] = Field(default_factory=set)
    publisher: str | None = Field(None, max_length=150)
    edition: str | None = Field(None, max_length=50)
    published_date: date | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value):
        if not value.strip():
            raise ValueError("Title is required")
        return value

    @field_validator("published_date")
    @classmethod
    def check_published_date(cls, value):
        return _not_in_future(value)


class BookUpdate(CatalogModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    # None means "leave the authors alone"; an empty set clears them
    author_ids: set[EntityId] | None = None
    publisher: str | None = Field(None, max_length=150)
    edition: str | None = Field(None, max_length=50)
    published_date: date | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value):
        if value is not None and not value.strip():
            raise ValueError("Title is required")
        return value

    @field_validator("published_date")
    @classmethod
    def check_published_date(cls, value):
        return _not_in_future(value)


class BookRead(CatalogModel):
    id: int
    title: str
    authors: List[AuthorSummary] = Field(default_factory=list)
    publisher: str | None = None
    edition: str | None = None
    published_date: date | None = None
