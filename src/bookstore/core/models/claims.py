"""Verified bearer token claims."""

from typing import Any

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Claims decoded from a verified bearer token."""

    raw_token: str = Field(description="The token as presented by the client")
    subject: str | None = Field(default=None, description="Subject (sub) claim")
    issuer: str | None = Field(default=None, description="Issuer (iss) claim")
    expires_at: int | float | None = Field(
        default=None, description="Expiration (exp) timestamp"
    )
    issued_at: int | float | None = Field(
        default=None, description="Issued-at (iat) timestamp"
    )
    jti: str | None = Field(default=None, description="Unique token identifier")
    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Every claim not mapped to a field above"
    )

    @classmethod
    def from_claims(cls, token: str, claims: dict[str, Any]) -> "TokenClaims":
        remaining_claims = dict(claims)
        return cls(
            raw_token=token,
            subject=_as_text(remaining_claims.pop("sub", None)),
            issuer=_as_text(remaining_claims.pop("iss", None)),
            expires_at=remaining_claims.pop("exp", None),
            issued_at=remaining_claims.pop("iat", None),
            jti=_as_text(remaining_claims.pop("jti", None)),
            custom_claims={
                k: v for k, v in remaining_claims.items() if k not in {"nbf", "aud"}
            },
        )


def _as_text(value: Any) -> str | None:
    # Signed payloads may carry numeric identifiers, e.g. {"sub": 42}
    return None if value is None else str(value)
