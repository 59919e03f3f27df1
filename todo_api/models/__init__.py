"""Request and response models."""

from .todo import ErrorResponse, HealthResponse, TodoCreate, TodoFilter, TodoItem, TodoUpdate

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "TodoCreate",
    "TodoFilter",
    "TodoItem",
    "TodoUpdate",
]
