"""
FastAPI dependencies for authentication and persistence.

``require_user`` is the auth gate: a route is protected exactly when it
declares it (directly or through its router).  ``get_store`` hands each
request its own session-bound store.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.jwt import TokenService, TokenValidationError
from config.settings import Settings
from core.errors import AuthenticationError
from database.store import SqlStore

logger = logging.getLogger(__name__)

# auto_error=False: missing/odd headers must produce our uniform 401, not FastAPI's 403
_bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_store(request: Request) -> AsyncGenerator[SqlStore, None]:
    """Yield a store bound to a fresh session; commit on success."""
    settings: Settings = request.app.state.settings
    async with request.app.state.session_factory() as session:
        try:
            yield SqlStore(session, timeout=settings.db_timeout_seconds)
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    user id and binding it to ``request.state.user_id``.

    Every failure is the same ``AuthenticationError``; the reason is only
    logged.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        logger.debug("Rejected %s: no bearer credentials", request.url.path)
        raise AuthenticationError()

    try:
        user_id = tokens.validate(credentials.credentials)
    except TokenValidationError as exc:
        logger.debug("Rejected %s: token %s", request.url.path, exc.reason.value)
        raise AuthenticationError()

    request.state.user_id = user_id
    return user_id
