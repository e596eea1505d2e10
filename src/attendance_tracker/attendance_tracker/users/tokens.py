from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_DAYS
from ..core.exceptions import AuthenticationError

JWT_ALGO = "HS256"


class TokenSigner:
    """Signs and verifies HS256 JWTs with one shared secret."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret

    def sign(self, payload: dict[str, Any], *, ttl: timedelta, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = dict(payload)
        claims["iat"] = int(now.timestamp())
        claims["exp"] = int((now + ttl).timestamp())
        return jwt.encode(claims, self._secret, algorithm=JWT_ALGO)

    def verify(self, token: str) -> dict[str, Any]:
        """Decoded claims; raises jwt.ExpiredSignatureError / jwt.InvalidTokenError."""

        return jwt.decode(token, self._secret, algorithms=[JWT_ALGO])


class BearerTokens:
    """Bearer tokens carrying the signed account id and role."""

    def __init__(self, signer: TokenSigner, *, ttl_days: int = DEFAULT_TOKEN_TTL_DAYS):
        self._signer = signer
        self._ttl = timedelta(days=int(ttl_days))

    def issue(self, *, account_id: int, role: str, now: Optional[datetime] = None) -> str:
        return self._signer.sign({"id": int(account_id), "role": role}, ttl=self._ttl, now=now)

    def decode(self, token: str) -> dict[str, Any]:
        if not token:
            raise AuthenticationError("No authentication token provided")
        try:
            claims = self._signer.verify(token)
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Token is not valid")
        if "id" not in claims:
            raise AuthenticationError("Token is not valid")
        return claims
