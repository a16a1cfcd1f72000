from enum import Enum

from pydantic import Field, field_validator
from .shared import CatalogModel


def _not_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class AuthorSortField(str, Enum):
    id = "id"
    name = "name"
    surname = "surname"
    birth_year = "birthYear"


class AuthorCreate(CatalogModel):
    name: str = Field(..., min_length=1, max_length=100)
    surname: str = Field(..., min_length=1, max_length=100)
    birth_year: int | None = Field(None, ge=1000, le=2100)

    @field_validator("name", "surname")
    @classmethod
    def check_not_blank(cls, value):
        return _not_blank(value)


class AuthorUpdate(CatalogModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    surname: str | None = Field(None, min_length=1, max_length=100)
    birth_year: int | None = Field(None, ge=1000, le=2100)

    @field_validator("name", "surname")
    @classmethod
    def check_not_blank(cls, value):
        return _not_blank(value)


class AuthorRead(CatalogModel):
    id: int
    name: str
    surname: str
    full_name: str
    birth_year: int | None = None
