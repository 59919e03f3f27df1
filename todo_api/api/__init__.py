"""HTTP routes and their dependencies."""

from .routes import router

__all__ = ["router"]
