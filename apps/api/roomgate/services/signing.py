"""JWT signing for room access tokens."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Protocol

import jwt
from jwt.algorithms import get_default_algorithms

from ..core.errors import InvalidTokenError, SigningError

logger = logging.getLogger(__name__)


class TokenSigner(Protocol):
    def sign(self, claims: dict[str, Any], *, issued_at: datetime, expires_in: timedelta) -> str: ...

    def verify(self, token: str) -> dict[str, Any]: ...


class JwtTokenSigner:
    """Sign and verify claim sets with a shared secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        if not secret or not secret.strip():
            logger.error("Token secret is not configured")
            raise SigningError()
        if algorithm not in get_default_algorithms():
            logger.error("Unsupported token algorithm configured: %s", algorithm)
            raise SigningError()
        self._secret = secret
        self._algorithm = algorithm

    def sign(self, claims: dict[str, Any], *, issued_at: datetime, expires_in: timedelta) -> str:
        """Return a signed token that expires ``expires_in`` after ``issued_at``."""

        payload = dict(claims)
        payload["iat"] = issued_at
        payload["exp"] = issued_at + expires_in
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.exception("Token signing failed: %s", exc)
            raise SigningError() from exc

    def verify(self, token: str) -> dict[str, Any]:
        """Decode a token, checking its signature and expiry."""

        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError(expired=True) from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError() from exc
