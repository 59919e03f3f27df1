"""Todo API: CRUD over todo items backed by PostgreSQL."""

from .main import create_app

__all__ = ["create_app"]
