from typing import Any

from authlib.jose import jwt


def sign_claims(claims: dict[str, Any], secret: str, algorithm: str = "HS256") -> str:
    """Sign an arbitrary claim set, bypassing the generator's defaults."""
    token = jwt.encode({"alg": algorithm, "typ": "JWT"}, claims, secret)
    return token.decode() if isinstance(token, bytes) else token


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
