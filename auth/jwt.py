"""
Bearer token issuance and validation.

Tokens are HS256 JWTs carrying a ``userId`` claim plus ``iat`` (and
``exp`` when an expiry is configured).  The signing secret comes from
``config.jwt_secret`` (env var: ``JWT_SECRET``) and is never logged.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Optional

import jwt as pyjwt

from core.errors import ConfigurationError

USER_ID_CLAIM = "userId"


class TokenFailure(str, Enum):
    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"


class TokenValidationError(Exception):
    """Raised by ``TokenService.validate``; ``reason`` says why."""

    def __init__(self, reason: TokenFailure) -> None:
        self.reason = reason
        super().__init__(reason.value)


class TokenService:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiry_seconds: Optional[int] = 604800,
    ) -> None:
        self._secret = secret or ""
        self.algorithm = algorithm
        self.expiry_seconds = expiry_seconds or 0

    def __repr__(self) -> str:
        return f"TokenService(algorithm={self.algorithm!r}, expiry_seconds={self.expiry_seconds})"

    def _require_secret(self) -> str:
        if not self._secret:
            raise ConfigurationError("JWT_SECRET is not configured")
        return self._secret

    def issue(self, user_id: str) -> str:
        """Create a signed token bound to ``user_id``."""
        secret = self._require_secret()
        if not user_id:
            raise ValueError("user_id is required to issue a token")

        now = int(time.time())
        payload = {USER_ID_CLAIM: str(user_id), "iat": now}
        if self.expiry_seconds > 0:
            payload["exp"] = now + self.expiry_seconds
        return pyjwt.encode(payload, secret, algorithm=self.algorithm)

    def validate(self, token: Optional[str]) -> str:
        """
        Verify ``token`` and return its ``userId``.

        Raises ``TokenValidationError`` for every kind of bad token, and
        ``ConfigurationError`` if no secret is configured.
        """
        secret = self._require_secret()
        if not token:
            raise TokenValidationError(TokenFailure.MISSING)

        try:
            payload = pyjwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["iat"]},
            )
        except pyjwt.ExpiredSignatureError:
            raise TokenValidationError(TokenFailure.EXPIRED)
        except pyjwt.InvalidSignatureError:
            raise TokenValidationError(TokenFailure.INVALID_SIGNATURE)
        except (
            pyjwt.DecodeError,
            pyjwt.InvalidAlgorithmError,
            pyjwt.MissingRequiredClaimError,
        ):
            raise TokenValidationError(TokenFailure.MALFORMED)
        except pyjwt.InvalidTokenError:
            raise TokenValidationError(TokenFailure.INVALID_SIGNATURE)

        user_id = payload.get(USER_ID_CLAIM)
        if not isinstance(user_id, str) or not user_id:
            raise TokenValidationError(TokenFailure.MALFORMED)
        return user_id
