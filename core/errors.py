"""
Service error taxonomy.

Handlers raise these; ``api.middleware`` maps them to HTTP responses.
Each error carries the legacy status code and the conventional ("strict")
one, selected at the boundary by ``config.strict_status_codes``.
"""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    status_code: int = 500
    strict_status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def status_for(self, strict: bool) -> int:
        return self.strict_status_code if strict else self.status_code


class ValidationError(ServiceError):
    """Missing or empty required fields."""

    status_code = 400
    strict_status_code = 400
    default_message = "Invalid request"


class ConflictError(ServiceError):
    """A record with the same unique key already exists."""

    status_code = 400
    strict_status_code = 409
    default_message = "User already exists"


class NotFoundError(ServiceError):
    status_code = 400
    strict_status_code = 404
    default_message = "User doesn't exist"


class InvalidCredentialsError(ServiceError):
    status_code = 400
    strict_status_code = 401
    default_message = "Invalid password"


class AuthenticationError(ServiceError):
    """Missing, invalid or expired bearer token. Always a bare 401."""

    status_code = 401
    strict_status_code = 401
    default_message = "Unauthorized"

    def __init__(self) -> None:
        super().__init__(self.default_message)


class InternalError(ServiceError):
    pass


class ConfigurationError(ServiceError):
    """Required configuration (signing secret, database URL) is absent."""
