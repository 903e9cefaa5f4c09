"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.core.errors import AuthError
from src.bookstore.core.models.claims import TokenClaims
from src.bookstore.core.services import TokenVerificationService
from src.bookstore.entities.book import BookRepository

BEARER_PREFIX = "Bearer "


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the service context created at startup."""
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session scoped to the request."""
    app_deps = get_app_dependencies(request)
    with app_deps.database_service.session_scope() as session:
        yield session


def get_token_verify_service(request: Request) -> TokenVerificationService:
    """Get the token verification service instance."""
    return get_app_dependencies(request).token_verify_service


def get_book_repository(db: Session = Depends(get_db_session)) -> BookRepository:
    return BookRepository(db)


async def require_bearer_token(
    request: Request,
    verifier: TokenVerificationService = Depends(get_token_verify_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer token.

    The decoded claims are attached to ``request.state.claims``.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header is None:
        raise AuthError("Token não fornecido!")

    if not auth_header.startswith(BEARER_PREFIX):
        raise AuthError()

    token = auth_header[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthError()

    claims = verifier.verify(token)
    request.state.claims = claims
    return claims
