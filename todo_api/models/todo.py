"""Todo data models using Pydantic."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class TodoCreate(BaseModel):
    """Body of ``POST /todo``."""

    name: str


class TodoUpdate(BaseModel):
    """Body of ``PUT /todo/{id}``; both fields are replaced."""

    name: str
    checked: bool


class TodoFilter(BaseModel):
    """Query string of ``GET /todo``."""

    done: Optional[bool] = None


class TodoItem(BaseModel):
    """A stored todo row."""

    id: int
    name: str
    checked: bool = False

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    message: str
    status: Literal["fail", "error"]


class HealthResponse(BaseModel):
    message: str = "OK"
    status: Literal["success"] = "success"
