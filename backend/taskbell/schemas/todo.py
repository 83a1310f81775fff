"""Todo schemas."""
from typing import Literal

from pydantic import BaseModel, Field, field_validator

Priority = Literal["high", "medium", "low"]


def _strip(value: str | None) -> str | None:
    return value.strip() if value is not None else value


def _require_title(value: str | None) -> str | None:
    if value is not None and not value:
        raise ValueError("Title must not be blank")
    return value


class TodoCreate(BaseModel):
    """Request to create a todo."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    completed: bool = False
    ongoing: bool = False
    priority: Priority = "medium"
    category: str = "Personal"
    start_date: str | None = None
    start_time: str | None = None
    end_date: str | None = None
    end_time: str | None = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _strip(value)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        return _require_title(value)


class TodoUpdate(BaseModel):
    """Partial todo update. Only supplied fields are applied."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    completed: bool | None = None
    ongoing: bool | None = None
    priority: Priority | None = None
    category: str | None = None
    start_date: str | None = None
    start_time: str | None = None
    end_date: str | None = None
    end_time: str | None = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _strip(value)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        return _require_title(value)


class TodoResponse(BaseModel):
    """Todo record with its computed display status."""

    id: str
    title: str
    description: str | None
    completed: bool
    ongoing: bool
    priority: str | None
    category: str | None
    start_date: str | None
    start_time: str | None
    end_date: str | None
    end_time: str | None
    completed_at: str | None
    created_at: str
    updated_at: str | None
    status: str  # completed, ongoing, overdue, pending

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    total: int
    skip: int
    limit: int
    has_more: bool


class TodoListResponse(BaseModel):
    """Paginated todo list response."""

    todos: list[TodoResponse]
    pagination: Pagination


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
