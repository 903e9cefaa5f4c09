import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from loguru import logger

from src.bookstore.core.errors import BookstoreError
from src.bookstore.runtime.config.config_data import JWTConfig

_REGISTERED_CLAIMS = {"iss", "sub", "exp", "iat", "nbf", "jti"}


class JwtGeneratorService:
    """Service for generating signed bearer tokens."""

    def __init__(self, jwt_config: JWTConfig):
        self._config = jwt_config

    def generate_token(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        algorithm: str = "HS256",
        include_jti: bool = True,
        secret: str | None = None,
    ) -> str:
        """Generate a signed token for API authentication using authlib.

        Args:
            subject: Subject (sub) claim - typically user ID
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime in seconds (defaults to config).
                A negative value produces an already expired token.
            algorithm: Signing algorithm (default: HS256)
            include_jti: Whether to include a unique JWT ID claim
            secret: Optional secret key for signing. If None, the configured
                shared secret is used.

        Returns:
            Signed JWT token string

        Raises:
            BookstoreError: If the secret is missing or the algorithm is not allowed
        """
        secret = secret or self._config.secret
        if not secret:
            raise BookstoreError("JWT signing secret not configured")

        if algorithm not in self._config.allowed_algorithms:
            logger.debug(
                "Attempted to use disallowed algorithm: {}, only {} are allowed",
                algorithm,
                self._config.allowed_algorithms,
            )
            raise BookstoreError(f"Algorithm {algorithm} not allowed")

        if expires_in_seconds is None:
            expires_in_seconds = self._config.token_lifetime_seconds

        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": self._config.issuer,
            "sub": subject,
            "iat": now,
            "exp": now + expires_in_seconds,
        }
        if include_jti:
            payload["jti"] = generate_token(16)

        # Registered claims are owned by this service
        if claims:
            payload.update(
                {k: v for k, v in claims.items() if k not in _REGISTERED_CLAIMS}
            )

        try:
            token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
        except JoseError as e:
            raise BookstoreError(f"JWT encoding failed: {e}") from e

        # authlib returns bytes, decode to string
        return token.decode() if isinstance(token, bytes) else token
