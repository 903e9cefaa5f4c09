"""Unit tests for BookRepository against an in-memory database."""

from unittest.mock import Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from src.bookstore.core.errors import (
    BookNotFoundError,
    InputValidationError,
    StorageError,
)
from src.bookstore.entities.book import BookCreate, BookRepository, BookUpdate


class TestBookRepository:
    """CRUD behavior of the repository."""

    def test_create_assigns_integer_id(self, book_repository: BookRepository):
        book = book_repository.create(
            BookCreate(name="Dune", page_count=412, category="Sci-Fi", author="Herbert")
        )

        assert isinstance(book.id, int)
        assert book.name == "Dune"
        assert book.page_count == 412
        assert book.created_at is not None
        assert book.updated_at is not None

    def test_create_assigns_distinct_ids(self, book_repository: BookRepository):
        first = book_repository.create(BookCreate(name="A"))
        second = book_repository.create(BookCreate(name="B"))

        assert first.id != second.id

    def test_create_with_no_fields_stores_nulls(self, book_repository: BookRepository):
        book = book_repository.create(BookCreate())

        fetched = book_repository.get(book.id)
        assert fetched.name is None
        assert fetched.page_count is None
        assert fetched.category is None
        assert fetched.author is None

    def test_get_returns_created_book(self, book_repository: BookRepository):
        created = book_repository.create(BookCreate(name="Emma", author="Austen"))

        fetched = book_repository.get(created.id)

        assert fetched == created

    def test_get_unknown_id_raises_not_found(self, book_repository: BookRepository):
        with pytest.raises(BookNotFoundError) as exc_info:
            book_repository.get(999)

        assert exc_info.value.book_id == 999
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Livro não encontrado"

    def test_list_all_empty(self, book_repository: BookRepository):
        assert book_repository.list_all() == []

    def test_list_all_returns_every_book(self, book_repository: BookRepository):
        created = [
            book_repository.create(BookCreate(name=name)) for name in ("A", "B", "C")
        ]

        listed = book_repository.list_all()

        assert sorted(b.id for b in listed) == sorted(b.id for b in created)

    def test_update_changes_only_provided_fields(self, book_repository: BookRepository):
        created = book_repository.create(
            BookCreate(name="Dune", page_count=412, category="Sci-Fi", author="Herbert")
        )

        updated = book_repository.update(
            created.id, BookUpdate.model_validate({"pageCount": 500})
        )

        assert updated.id == created.id
        assert updated.page_count == 500
        assert updated.name == "Dune"
        assert updated.category == "Sci-Fi"
        assert updated.author == "Herbert"
        assert book_repository.get(created.id).page_count == 500

    def test_update_with_empty_body_is_a_no_op(self, book_repository: BookRepository):
        created = book_repository.create(BookCreate(name="Dune", page_count=412))

        updated = book_repository.update(created.id, BookUpdate())

        assert updated == created

    def test_update_explicit_null_clears_field(self, book_repository: BookRepository):
        created = book_repository.create(BookCreate(name="Dune", author="Herbert"))

        updated = book_repository.update(
            created.id, BookUpdate.model_validate({"author": None})
        )

        assert updated.author is None
        assert updated.name == "Dune"

    def test_update_unknown_id_raises_not_found(self, book_repository: BookRepository):
        with pytest.raises(BookNotFoundError):
            book_repository.update(999, BookUpdate(name="Nope"))

    def test_delete_removes_book(self, book_repository: BookRepository):
        created = book_repository.create(BookCreate(name="Dune"))

        book_repository.delete(created.id)

        with pytest.raises(BookNotFoundError):
            book_repository.get(created.id)
        assert book_repository.list_all() == []

    def test_delete_twice_raises_not_found(self, book_repository: BookRepository):
        created = book_repository.create(BookCreate(name="Dune"))
        book_repository.delete(created.id)

        with pytest.raises(BookNotFoundError):
            book_repository.delete(created.id)

    def test_delete_leaves_other_books(self, book_repository: BookRepository):
        first = book_repository.create(BookCreate(name="A"))
        second = book_repository.create(BookCreate(name="B"))

        book_repository.delete(second.id)

        assert book_repository.get(first.id).name == "A"
        assert [b.id for b in book_repository.list_all()] == [first.id]


class TestBookRepositoryStorageFailures:
    """Storage faults are rolled back and translated."""

    @pytest.fixture
    def broken_session(self) -> Mock:
        return Mock(spec=Session)

    def test_list_failure_raises_storage_error(self, broken_session: Mock):
        broken_session.exec.side_effect = OperationalError(
            "SELECT", {}, Exception("database is locked")
        )
        repository = BookRepository(broken_session)

        with pytest.raises(StorageError) as exc_info:
            repository.list_all()

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Erro ao acessar o banco de dados"
        broken_session.rollback.assert_called_once()

    def test_get_failure_raises_storage_error(self, broken_session: Mock):
        broken_session.get.side_effect = OperationalError(
            "SELECT", {}, Exception("disk I/O error")
        )
        repository = BookRepository(broken_session)

        with pytest.raises(StorageError):
            repository.get(1)

    def test_commit_failure_raises_storage_error(self, broken_session: Mock):
        broken_session.commit.side_effect = OperationalError(
            "INSERT", {}, Exception("disk full")
        )
        repository = BookRepository(broken_session)

        with pytest.raises(StorageError):
            repository.create(BookCreate(name="Dune"))

        broken_session.rollback.assert_called_once()

    def test_integrity_failure_raises_input_validation_error(self, broken_session: Mock):
        broken_session.commit.side_effect = IntegrityError(
            "INSERT", {}, Exception("NOT NULL constraint failed: books.name")
        )
        repository = BookRepository(broken_session)

        with pytest.raises(InputValidationError) as exc_info:
            repository.create(BookCreate())

        assert exc_info.value.status_code == 400
        assert "NOT NULL" in exc_info.value.message
        broken_session.rollback.assert_called_once()
