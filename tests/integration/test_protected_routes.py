"""Bearer token enforcement on the /books routes."""

import time

from fastapi.testclient import TestClient

from src.bookstore.api.http.app import create_app
from tests.utils import bearer, sign_claims


class TestProtectedBooks:
    """With auth.protect_books enabled every /books route needs a token."""

    def test_missing_token(self, protected_client: TestClient):
        response = protected_client.get("/books")

        assert response.status_code == 401
        assert response.json() == {"error": "Token não fornecido!"}

    def test_wrong_scheme(self, protected_client: TestClient):
        response = protected_client.get(
            "/books", headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Autenticação inválida!"}

    def test_invalid_token(self, protected_client: TestClient):
        response = protected_client.get("/books", headers=bearer("not-a-token"))

        assert response.status_code == 401
        assert response.json() == {"error": "Autenticação inválida!"}

    def test_wrong_secret(self, protected_client: TestClient):
        token = sign_claims({"sub": "user-123"}, "some-other-secret")

        response = protected_client.get("/books", headers=bearer(token))

        assert response.status_code == 401

    def test_expired_token(self, protected_client: TestClient, expired_token: str):
        response = protected_client.get("/books", headers=bearer(expired_token))

        assert response.status_code == 401
        assert response.json() == {"error": "Autenticação inválida!"}

    def test_valid_token(self, protected_client: TestClient, token_factory):
        headers = bearer(token_factory())

        created = protected_client.post("/books", json={"name": "Dune"}, headers=headers)
        assert created.status_code == 201

        response = protected_client.get("/books", headers=headers)
        assert response.status_code == 200
        assert [book["name"] for book in response.json()] == ["Dune"]

    def test_numeric_subject_accepted(self, protected_client: TestClient, jwt_secret: str):
        """Any correctly signed payload authenticates, whatever its claim types."""
        token = sign_claims({"sub": 42, "id": 7}, jwt_secret)

        response = protected_client.get("/books", headers=bearer(token))

        assert response.status_code == 200

    def test_numeric_registered_claims_accepted(
        self, protected_client: TestClient, jwt_secret: str
    ):
        token = sign_claims(
            {"sub": 42, "iss": 1, "jti": 99, "exp": time.time() + 600.5}, jwt_secret
        )

        response = protected_client.get("/books", headers=bearer(token))

        assert response.status_code == 200

    def test_every_route_protected(self, protected_client: TestClient):
        for method, path in [
            ("post", "/books"),
            ("get", "/books"),
            ("get", "/books/1"),
            ("put", "/books/1"),
            ("delete", "/books/1"),
        ]:
            response = protected_client.request(method.upper(), path, json={})
            assert response.status_code == 401, (method, path)

    def test_auth_checked_before_lookup(self, protected_client: TestClient):
        """An unauthenticated request for an unknown book is a 401, not a 404."""
        response = protected_client.get("/books/99999")

        assert response.status_code == 401

    def test_health_stays_public(self, protected_client: TestClient):
        assert protected_client.get("/health").status_code == 200

    def test_protected_without_secret_is_server_error(self, protected_config, jwt_secret):
        config = protected_config.model_copy(deep=True)
        config.jwt.secret = None
        token = sign_claims({"sub": "user-123"}, jwt_secret)

        with TestClient(create_app(config)) as client:
            response = client.get("/books", headers=bearer(token))

        assert response.status_code == 500
        assert "error" in response.json()


class TestOpenBooks:
    """With protection disabled tokens are neither needed nor checked."""

    def test_no_token_needed(self, client: TestClient):
        assert client.get("/books").status_code == 200

    def test_garbage_token_ignored(self, client: TestClient):
        response = client.get("/books", headers=bearer("not-a-token"))

        assert response.status_code == 200
