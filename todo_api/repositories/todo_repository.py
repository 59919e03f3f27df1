"""Todo repository - data access layer."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import asyncpg

from ..errors import ConstraintViolation, NotFound, StorageError
from ..models.todo import TodoItem

logger = logging.getLogger(__name__)

SELECT_TODOS = "SELECT id, name, checked FROM todo ORDER BY id"
SELECT_TODOS_BY_CHECKED = "SELECT id, name, checked FROM todo WHERE checked = $1 ORDER BY id"
INSERT_TODO = "INSERT INTO todo (name) VALUES ($1) RETURNING id, name, checked"
UPDATE_TODO = "UPDATE todo SET name = $1, checked = $2 WHERE id = $3 RETURNING id, name, checked"
DELETE_TODO = "DELETE FROM todo WHERE id = $1"


def _row_to_item(row: Mapping[str, Any]) -> TodoItem:
    return TodoItem.model_validate(dict(row))


def _affected_rows(command_tag: str) -> int:
    try:
        return int(command_tag.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError) as exc:
        logger.error("Unexpected command tag %r", command_tag)
        raise StorageError() from exc


class TodoRepository:
    """Parameterized SQL over a single leased connection."""

    def __init__(self, conn: asyncpg.Connection) -> None:
        self.conn = conn

    async def list(self, done: Optional[bool] = None) -> List[TodoItem]:
        """List todos by ascending id, optionally only those with ``checked == done``."""
        try:
            if done is None:
                rows = await self.conn.fetch(SELECT_TODOS)
            else:
                rows = await self.conn.fetch(SELECT_TODOS_BY_CHECKED, done)
        except asyncpg.PostgresError as exc:
            raise self._storage_error("list", exc) from exc
        return [_row_to_item(row) for row in rows]

    async def create(self, name: str) -> TodoItem:
        """Insert an unchecked todo; the table's CHECK constraint rejects blank names."""
        try:
            row = await self.conn.fetchrow(INSERT_TODO, name)
        except asyncpg.PostgresError as exc:
            raise self._storage_error("create", exc) from exc
        item = _row_to_item(row)
        logger.info("Created todo id=%s", item.id)
        return item

    async def update(self, todo_id: int, name: str, checked: bool) -> TodoItem:
        try:
            row = await self.conn.fetchrow(UPDATE_TODO, name, checked, todo_id)
        except asyncpg.PostgresError as exc:
            raise self._storage_error("update", exc) from exc
        if row is None:
            raise NotFound(f"Todo with id {todo_id} not found")
        logger.info("Updated todo id=%s checked=%s", todo_id, checked)
        return _row_to_item(row)

    async def delete(self, todo_id: int) -> None:
        try:
            command_tag = await self.conn.execute(DELETE_TODO, todo_id)
        except asyncpg.PostgresError as exc:
            raise self._storage_error("delete", exc) from exc
        if _affected_rows(command_tag) == 0:
            raise NotFound(f"Todo with id {todo_id} not found")
        logger.info("Deleted todo id=%s", todo_id)

    @staticmethod
    def _storage_error(operation: str, exc: asyncpg.PostgresError) -> StorageError:
        if isinstance(exc, asyncpg.IntegrityConstraintViolationError):
            logger.info("Todo %s rejected by constraint: %s", operation, type(exc).__name__)
            return ConstraintViolation("Todo name must not be empty")
        logger.error("Todo %s failed: %s", operation, exc)
        return StorageError()
