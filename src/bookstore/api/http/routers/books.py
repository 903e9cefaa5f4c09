"""Book API router with CRUD operations."""

from fastapi import APIRouter, Depends, status

from src.bookstore.api.http.deps import get_book_repository
from src.bookstore.entities.book import Book, BookCreate, BookRepository, BookUpdate

router = APIRouter()

_NOT_FOUND = {404: {"description": "Livro não encontrado"}}


@router.post(
    "",
    response_model=Book,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Erro na criação do livro"}},
)
def create_book(
    book: BookCreate,
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Create a new book."""
    return repository.create(book)


@router.get("", response_model=list[Book])
def list_books(
    repository: BookRepository = Depends(get_book_repository),
) -> list[Book]:
    """List all books."""
    return repository.list_all()


@router.get("/{book_id}", response_model=Book, responses=_NOT_FOUND)
def get_book(
    book_id: int,
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Get a book by ID."""
    return repository.get(book_id)


@router.put("/{book_id}", response_model=Book, responses=_NOT_FOUND)
def update_book(
    book_id: int,
    book_update: BookUpdate,
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Update the fields present in the body, leaving the others untouched."""
    return repository.update(book_id, book_update)


@router.delete("/{book_id}", responses=_NOT_FOUND)
def delete_book(
    book_id: int,
    repository: BookRepository = Depends(get_book_repository),
) -> dict[str, str]:
    """Delete a book."""
    repository.delete(book_id)
    return {"message": "Livro deletado com sucesso"}
