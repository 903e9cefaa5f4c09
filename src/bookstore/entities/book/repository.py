"""Book repository."""

from datetime import UTC, datetime
from typing import NoReturn

from loguru import logger
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from src.bookstore.core.errors import (
    BookNotFoundError,
    InputValidationError,
    StorageError,
)
from src.bookstore.entities.book.entity import Book, BookCreate, BookUpdate
from src.bookstore.entities.book.table import BookTable


class BookRepository:
    """Data-access layer for books.

    Every mutating call runs in its own single-row transaction and commits
    before returning. Storage faults are rolled back and re-raised as
    ``InputValidationError`` (shape rejected by the database) or
    ``StorageError`` (anything else).
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, fields: BookCreate) -> Book:
        row = BookTable(**fields.model_dump())
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            self._fail("create", exc)
        logger.debug("Created book {}", row.id)
        return Book.model_validate(row, from_attributes=True)

    def list_all(self) -> list[Book]:
        try:
            rows = self._session.exec(select(BookTable)).all()
        except SQLAlchemyError as exc:
            self._fail("list", exc)
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def get(self, book_id: int) -> Book:
        return Book.model_validate(self._get_row(book_id), from_attributes=True)

    def update(self, book_id: int, fields: BookUpdate) -> Book:
        row = self._get_row(book_id)
        for name, value in fields.model_dump(exclude_unset=True).items():
            setattr(row, name, value)
        row.updated_at = datetime.now(UTC)
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            self._fail("update", exc)
        logger.debug("Updated book {}", book_id)
        return Book.model_validate(row, from_attributes=True)

    def delete(self, book_id: int) -> None:
        row = self._get_row(book_id)
        try:
            self._session.delete(row)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._fail("delete", exc)
        logger.debug("Deleted book {}", book_id)

    def _get_row(self, book_id: int) -> BookTable:
        try:
            row = self._session.get(BookTable, book_id)
        except SQLAlchemyError as exc:
            self._fail("get", exc)
        if row is None:
            raise BookNotFoundError(book_id)
        return row

    def _fail(self, operation: str, exc: SQLAlchemyError) -> NoReturn:
        self._session.rollback()
        logger.bind(operation=operation, error_type=type(exc).__name__).error(
            "Book {} failed: {}", operation, exc
        )
        if isinstance(exc, (IntegrityError, DataError)):
            raise InputValidationError(str(exc.orig)) from exc
        raise StorageError() from exc
