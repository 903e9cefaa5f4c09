"""Bearer token verification service."""

from authlib.jose import JoseError, JsonWebToken
from loguru import logger
from pydantic import ValidationError

from src.bookstore.core.errors import AuthError, BookstoreError
from src.bookstore.core.models.claims import TokenClaims
from src.bookstore.runtime.config.config_data import JWTConfig


class TokenVerificationService:
    """Verifies HMAC-signed tokens against the shared secret."""

    def __init__(self, jwt_config: JWTConfig):
        self._config = jwt_config
        self._jwt = JsonWebToken(jwt_config.allowed_algorithms)

    def verify(self, token: str) -> TokenClaims:
        """Verify signature, expiry and not-before of ``token``.

        Raises:
            AuthError: If the token is malformed, badly signed, expired or
                uses an algorithm outside the allow-list.
            BookstoreError: If no shared secret is configured.
        """
        secret = self._config.secret
        if not secret:
            logger.error("Token verification requested but no JWT secret is configured")
            raise BookstoreError("JWT signing secret not configured")

        claims_options = {"exp": {"essential": True}} if self._config.require_exp else None

        try:
            claims = self._jwt.decode(token, secret, claims_options=claims_options)
            claims.validate(leeway=self._config.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.bind(error_type=type(exc).__name__).info(
                "Rejected bearer token: {}", exc
            )
            raise AuthError() from exc

        try:
            return TokenClaims.from_claims(token, dict(claims))
        except ValidationError as exc:
            logger.info("Rejected bearer token with malformed claims: {}", exc)
            raise AuthError() from exc
