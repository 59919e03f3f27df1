"""API routes for todo management."""

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from .. import db
from ..db import StoragePool
from ..models.todo import ErrorResponse, HealthResponse, TodoCreate, TodoFilter, TodoItem, TodoUpdate
from ..repositories.todo_repository import TodoRepository
from .dependencies import get_pool, get_todo_filter

# todo.id is a SERIAL (int4) column
INT4_MIN = -2_147_483_648
INT4_MAX = 2_147_483_647

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

router = APIRouter(responses=_ERROR_RESPONSES)


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health(pool: StoragePool = Depends(get_pool)) -> HealthResponse:
    """Report success only when a database connection can be leased and queried."""
    await db.ping(pool)
    return HealthResponse()


@router.get("/todo", response_model=List[TodoItem], tags=["todo"])
async def list_todos(
    todo_filter: TodoFilter = Depends(get_todo_filter),
    pool: StoragePool = Depends(get_pool),
) -> List[TodoItem]:
    """Get all todo items, optionally filtered by ``done``."""
    async with pool.acquire() as conn:
        return await TodoRepository(conn).list(todo_filter.done)


@router.post(
    "/todo",
    response_model=TodoItem,
    status_code=status.HTTP_201_CREATED,
    tags=["todo"],
)
async def create_todo(
    todo_data: TodoCreate,
    pool: StoragePool = Depends(get_pool),
) -> TodoItem:
    """Create a new todo item."""
    async with pool.acquire() as conn:
        return await TodoRepository(conn).create(todo_data.name)


@router.put(
    "/todo/{todo_id}",
    response_model=TodoItem,
    responses={404: {"model": ErrorResponse}},
    tags=["todo"],
)
async def update_todo(
    todo_data: TodoUpdate,
    todo_id: int = Path(..., ge=INT4_MIN, le=INT4_MAX),
    pool: StoragePool = Depends(get_pool),
) -> TodoItem:
    """Replace the name and checked flag of an existing todo item."""
    async with pool.acquire() as conn:
        return await TodoRepository(conn).update(todo_id, todo_data.name, todo_data.checked)


@router.delete(
    "/todo/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    tags=["todo"],
)
async def delete_todo(
    todo_id: int = Path(..., ge=INT4_MIN, le=INT4_MAX),
    pool: StoragePool = Depends(get_pool),
) -> Response:
    """Delete a todo item."""
    async with pool.acquire() as conn:
        await TodoRepository(conn).delete(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
