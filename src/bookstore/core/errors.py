"""Application error taxonomy.

Each error carries the HTTP status and the client-facing message it is
translated to; the translation itself is registered on the FastAPI app.
"""


class BookstoreError(Exception):
    """Base class for errors that are reported to the client."""

    status_code: int = 500
    message: str = "Erro interno do servidor"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class NotFoundError(BookstoreError):
    status_code = 404
    message = "Recurso não encontrado"


class BookNotFoundError(NotFoundError):
    message = "Livro não encontrado"

    def __init__(self, book_id: int | None = None, message: str | None = None) -> None:
        self.book_id = book_id
        super().__init__(message)


class InputValidationError(BookstoreError):
    """Malformed or type-mismatched input, including shapes rejected by storage."""

    status_code = 400
    message = "Dados inválidos"


class AuthError(BookstoreError):
    """Missing, malformed, invalid or expired bearer token."""

    status_code = 401
    message = "Autenticação inválida!"


class StorageError(BookstoreError):
    """Unexpected failure of the persistence backend."""

    status_code = 500
    message = "Erro ao acessar o banco de dados"
