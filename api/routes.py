"""
Todo API routes.  Every route on this router requires a bearer token.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from auth.dependencies import get_store, require_user
from core.todos import TodoHandler
from database.store import SqlStore
from utils.schemas import ErrorResponse, TodoCreateRequest, TodoListResponse, TodoOut, TodoResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["todos"],
    dependencies=[Depends(require_user)],
    responses={401: {"model": ErrorResponse}},
)


def get_todo_handler(store: SqlStore = Depends(get_store)) -> TodoHandler:
    return TodoHandler(store)


@router.post("/todo", response_model=TodoResponse)
async def create_todo(
    req: TodoCreateRequest,
    user_id: str = Depends(require_user),
    todos: TodoHandler = Depends(get_todo_handler),
) -> Dict[str, Any]:
    """Create a todo owned by the caller."""
    todo = await todos.create_todo(user_id, req.title, req.description, req.completed)
    return {"todo": TodoOut.model_validate(todo)}


@router.get("/todos", response_model=TodoListResponse)
async def list_todos(
    user_id: str = Depends(require_user),
    todos: TodoHandler = Depends(get_todo_handler),
) -> Dict[str, Any]:
    """List the caller's todos."""
    records = await todos.list_todos(user_id)
    return {"todos": [TodoOut.model_validate(t) for t in records]}
