"""
Account use cases — signup and signin.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from auth.jwt import TokenService
from auth.password import (
    DEFAULT_ITERATIONS,
    hash_password,
    needs_rehash,
    verify_password,
)
from core.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from database.store import Store

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Please provide email and password"


class AccountHandler:
    def __init__(
        self,
        store: Store,
        tokens: TokenService,
        iterations: int = DEFAULT_ITERATIONS,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.iterations = iterations

    async def signup(self, email: Optional[str], password: Optional[str]) -> str:
        """
        Register a user and return the new user id.

        The email lookup is only an early exit: two concurrent signups can
        both pass it, and the store's unique constraint decides the winner.
        """
        if not email or not password:
            raise ValidationError(MISSING_CREDENTIALS)

        if await self.store.find_user_by_email(email) is not None:
            raise ConflictError("User already exists")

        credential = await asyncio.to_thread(hash_password, password, self.iterations)
        user = await self.store.create_user(email, credential)

        logger.info("Registered user %s", user.id)
        return str(user.id)

    async def signin(self, email: Optional[str], password: Optional[str]) -> str:
        """Check credentials and return a bearer token."""
        if not email or not password:
            raise ValidationError(MISSING_CREDENTIALS)

        user = await self.store.find_user_by_email(email)
        if user is None:
            raise NotFoundError("User doesn't exist")

        if not await asyncio.to_thread(verify_password, password, user.password):
            logger.info("Signin rejected for user %s: bad password", user.id)
            raise InvalidCredentialsError("Invalid password")

        if needs_rehash(user.password, self.iterations):
            # Best effort: the password already checked out.
            try:
                credential = await asyncio.to_thread(hash_password, password, self.iterations)
                await self.store.update_user_password(user, credential)
                logger.info("Upgraded password work factor for user %s", user.id)
            except ServiceError:
                logger.warning("Could not upgrade password work factor for user %s", user.id)

        token = self.tokens.issue(str(user.id))
        logger.info("Signin: %s", user.id)
        return token
