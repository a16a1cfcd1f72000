from datetime import date

from database import Base
from sqlalchemy import BigInteger, Table, Column, Date, String, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 64-bit ids; SQLite only autoincrements a column declared exactly INTEGER
IdType = BigInteger().with_variant(Integer, "sqlite")


class Author(Base):
    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    birth_year: Mapped[int | None] = mapped_column(Integer)

    # read-only side of authors <-> books; links are written through Book.authors
    books: Mapped[list["Book"]] = relationship(
        secondary="book_authors",
        viewonly=True,
        order_by="Book.title",
    )

    __table_args__ = (
        CheckConstraint(
            "birth_year IS NULL OR (birth_year >= 1000 AND birth_year <= 2100)",
            name="ck_authors_birth_year_range",
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"


class Book(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    publisher: Mapped[str | None] = mapped_column(String(150))
    edition: Mapped[str | None] = mapped_column(String(50))
    published_date: Mapped[date | None] = mapped_column(Date)

    # many-to-many: books -> authors (owning side)
    authors: Mapped[list["Author"]] = relationship(
        secondary="book_authors",
    )


book_authors = Table(
    "book_authors",
    Base.metadata,
    Column("book_id", IdType, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("author_id", IdType, ForeignKey("authors.id", ondelete="RESTRICT"), primary_key=True),
)
