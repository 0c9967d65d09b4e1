"""Pydantic request/response schemas for the Todo Tracker API.

Wire names are camelCase (``todoId``, ``categoryId``, ``hasNext``); the
models accept either spelling on input and always emit camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateTodoRequest(_CamelModel):
    task: str = Field(..., min_length=1)
    category_id: str | None = None


class UpdateTodoRequest(_CamelModel):
    completed: bool | None = None
    task: str | None = None


class CreateCategoryRequest(_CamelModel):
    name: str = Field(..., min_length=1)
    color: str | None = None


class TodoResponse(_CamelModel):
    user_id: str
    todo_id: str
    task: str | None = None
    completed: bool = False
    category_id: str | None = None
    created: str | None = None


class PaginationResponse(_CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class TodoListResponse(_CamelModel):
    items: list[TodoResponse]
    pagination: PaginationResponse


class CategoryResponse(_CamelModel):
    user_id: str
    category_id: str
    name: str | None = None
    color: str | None = None
    created: str | None = None


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    version: str
    backend: str
    store: str
