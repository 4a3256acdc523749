"""
Pydantic request / response schemas for the HTTP API.

Request fields are all optional on purpose: a missing field is a 400 from
the handlers, not a 422 from FastAPI.  Responses use camelCase keys.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ═══════════════════════════════════════════════════════════════════════════════
# Accounts
# ═══════════════════════════════════════════════════════════════════════════════


class CredentialsRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignupResponse(BaseModel):
    user_id: str = Field(..., alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class SigninResponse(BaseModel):
    token: str


# ═══════════════════════════════════════════════════════════════════════════════
# Todos
# ═══════════════════════════════════════════════════════════════════════════════


class TodoCreateRequest(BaseModel):
    """Body of ``POST /todo``.  Any client-sent ``userId`` is ignored."""

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = False


class TodoOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    completed: bool
    user_id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite drops tzinfo; every timestamp we write is UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class TodoResponse(BaseModel):
    todo: TodoOut


class TodoListResponse(BaseModel):
    todos: List[TodoOut] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    message: str
