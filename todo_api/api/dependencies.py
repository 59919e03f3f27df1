"""API dependencies for todo management."""

from typing import Optional

from fastapi import Query, Request

from ..db import StoragePool
from ..errors import PoolError
from ..models.todo import TodoFilter


def get_pool(request: Request) -> StoragePool:
    """Dependency returning the pool attached to the running application."""
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise PoolError("Database pool not initialized")
    return pool


def get_todo_filter(
    done: Optional[bool] = Query(None, description="Only return todos whose checked flag matches"),
) -> TodoFilter:
    """Dependency for the optional ``done`` query flag."""
    return TodoFilter(done=done)
