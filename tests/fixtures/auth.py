from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from src.bookstore.api.http.app import create_app
from src.bookstore.core.services import JwtGeneratorService, TokenVerificationService
from src.bookstore.runtime.config.config_data import ConfigData


@pytest.fixture
def jwt_generate_service(test_config: ConfigData) -> JwtGeneratorService:
    return JwtGeneratorService(test_config.jwt)


@pytest.fixture
def jwt_verify_service(test_config: ConfigData) -> TokenVerificationService:
    return TokenVerificationService(test_config.jwt)


@pytest.fixture
def token_factory(
    jwt_generate_service: JwtGeneratorService,
) -> Callable[..., str]:
    def _make_token(subject: str = "user-123", **kwargs) -> str:
        return jwt_generate_service.generate_token(subject, **kwargs)

    return _make_token


@pytest.fixture
def expired_token(token_factory: Callable[..., str]) -> str:
    # Well past the configured clock skew
    return token_factory(expires_in_seconds=-3600)


@pytest.fixture
def protected_config(test_config: ConfigData) -> ConfigData:
    config = test_config.model_copy(deep=True)
    config.auth.protect_books = True
    return config


@pytest.fixture
def protected_client(protected_config: ConfigData) -> Iterator[TestClient]:
    """Test client for an app that requires a bearer token on /books."""
    with TestClient(create_app(protected_config)) as client:
        yield client
