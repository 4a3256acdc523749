"""
Account API routes — signup, signin.  Both are public.

Route prefix: /api/v1
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from auth.dependencies import get_settings, get_store, get_token_service
from auth.jwt import TokenService
from config.settings import Settings
from core.accounts import AccountHandler
from database.store import SqlStore
from utils.schemas import (
    CredentialsRequest,
    ErrorResponse,
    SigninResponse,
    SignupResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"], responses={400: {"model": ErrorResponse}})


def get_account_handler(
    store: SqlStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> AccountHandler:
    return AccountHandler(store, tokens, iterations=settings.password_iterations)


@router.post("/signup", response_model=SignupResponse)
async def signup(
    req: CredentialsRequest,
    accounts: AccountHandler = Depends(get_account_handler),
) -> Dict[str, Any]:
    """Register a new user."""
    user_id = await accounts.signup(req.email, req.password)
    return {"userId": user_id}


@router.post("/signin", response_model=SigninResponse)
async def signin(
    req: CredentialsRequest,
    accounts: AccountHandler = Depends(get_account_handler),
) -> Dict[str, Any]:
    """Sign in with email + password and receive a bearer token."""
    token = await accounts.signin(req.email, req.password)
    return {"token": token}
