"""Entity: Book."""

from typing import Any

from pydantic import Field

from src.bookstore.entities._base import Entity, Schema


_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class BookFields(Schema):
    """The four mutable attributes of a book, all optional.

    Fields are strict: JSON types are taken as sent, so ``"412"`` or ``true``
    for ``pageCount`` is rejected rather than coerced.
    """

    name: str | None = Field(default=None, strict=True, description="Title of the book")
    # Bounded to a 64-bit INTEGER column
    page_count: int | None = Field(
        default=None,
        strict=True,
        ge=_INT64_MIN,
        le=_INT64_MAX,
        description="Number of pages",
    )
    category: str | None = Field(
        default=None, strict=True, description="Category or genre"
    )
    author: str | None = Field(default=None, strict=True, description="Author name")


class BookCreate(BookFields):
    """Payload for creating a book; omitted fields are stored as null."""


class BookUpdate(BookFields):
    """Partial payload for updating a book.

    Only the fields present in the request are applied; use
    ``model_dump(exclude_unset=True)`` to get them.
    """


class Book(BookFields, Entity):
    """Book entity representing a book in the system.

    This is the domain model returned by the repository. It is a plain data
    structure; persistence lives in ``BookTable``.
    """

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.page_count == other.page_count
            and self.category == other.category
            and self.author == other.author
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.page_count,
            self.category,
            self.author,
        ))
