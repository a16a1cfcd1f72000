"""Conversions between ORM entities and transport schemas.

All functions are pure and return ``None`` when handed ``None``.
"""
from models import Author, Book
from schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from schemas.book import BookCreate, BookRead, BookUpdate
from schemas.shared import AuthorSummary, BookSummary


def to_author_read(author: Author | None) -> AuthorRead | None:
    if author is None:
        return None
    return AuthorRead(
        id=author.id,
        name=author.name,
        surname=author.surname,
        full_name=author.full_name,
        birth_year=author.birth_year,
    )


def to_author_summary(author: Author | None) -> AuthorSummary | None:
    if author is None:
        return None
    return AuthorSummary(id=author.id, full_name=author.full_name)


def to_author_entity(request: AuthorCreate | None) -> Author | None:
    if request is None:
        return None
    return Author(
        name=request.name,
        surname=request.surname,
        birth_year=request.birth_year,
    )


def apply_author_update(author: Author, request: AuthorUpdate) -> Author:
    # absent and null fields both keep the stored value
    for key, val in request.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(author, key, val)
    return author


def to_book_read(book: Book | None) -> BookRead | None:
    if book is None:
        return None
    return BookRead(
        id=book.id,
        title=book.title,
        authors=[to_author_summary(a) for a in sorted(book.authors, key=lambda a: a.id)],
        publisher=book.publisher,
        edition=book.edition,
        published_date=book.published_date,
    )


def to_book_summary(book: Book | None) -> BookSummary | None:
    if book is None:
        return None
    return BookSummary(id=book.id, title=book.title, publisher=book.publisher)


def to_book_entity(request: BookCreate | None) -> Book | None:
    if request is None:
        return None
    return Book(
        title=request.title,
        publisher=request.publisher,
        edition=request.edition,
        published_date=request.published_date,
    )


def apply_book_update(book: Book, request: BookUpdate) -> Book:
    """Copy scalar fields onto ``book``. The author set is handled by the caller."""
    update_data = request.model_dump(
        exclude={"author_ids"}, exclude_unset=True, exclude_none=True
    )
    for key, val in update_data.items():
        setattr(book, key, val)
    return book
