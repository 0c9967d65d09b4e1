"""FastAPI application for Todo Tracker."""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from todo_tracker import __version__
from todo_tracker.api.dependencies import get_category_service, get_store, get_todo_service
from todo_tracker.api.errors import OperationFailed, operation_failed_handler, operation_failure
from todo_tracker.api.schemas import (
    CategoryResponse,
    CreateCategoryRequest,
    CreateTodoRequest,
    ErrorResponse,
    HealthResponse,
    PaginationResponse,
    SuccessResponse,
    TodoListResponse,
    TodoResponse,
    UpdateTodoRequest,
)
from todo_tracker.api.user import get_owner_id
from todo_tracker.config import get_settings
from todo_tracker.core.categories import CategoryService
from todo_tracker.core.query import ListParams
from todo_tracker.core.todos import TodoService
from todo_tracker.db.store import TableStore
from todo_tracker.logging_setup import configure_logging

logger = structlog.get_logger()

_ERRORS = {404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _check_migrations() -> None:
    """Warn on startup if the Lakebase tables have pending migrations."""
    try:
        from alembic.config import Config
        from alembic.script import ScriptDirectory

        project_root = Path(__file__).resolve().parents[3]
        alembic_cfg = Config(str(project_root / "alembic.ini"))
        alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
        head = ScriptDirectory.from_config(alembic_cfg).get_current_head()

        store = get_store()
        with store.session() as conn, conn.cursor() as cur:
            cur.execute("SELECT version_num FROM alembic_version")
            row = cur.fetchone()
            current = row[0] if row else None

        if current is None:
            logger.warning(
                "migrations_not_initialized",
                hint="Run 'alembic upgrade head' to create the store tables",
            )
        elif current != head:
            logger.warning(
                "migrations_pending",
                current=current,
                head=head,
                hint="Run 'alembic upgrade head' to apply pending migrations",
            )
        else:
            logger.info("migrations_up_to_date", revision=current)
    except Exception as e:
        logger.warning("migration_check_failed", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    logger.info("app_starting", version=__version__, backend=settings.store.backend)
    if settings.store.backend == "lakebase":
        _check_migrations()
    yield


app = FastAPI(
    title="Todo Tracker API",
    description="Categorized todos with search, sorting and pagination",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(OperationFailed, operation_failed_handler)


@app.get("/api/health", response_model=HealthResponse)
async def health(store: TableStore = Depends(get_store)) -> HealthResponse:
    store_status = "connected" if store.health_check() else "disconnected"
    return HealthResponse(
        status="ok",
        version=__version__,
        backend=get_settings().store.backend,
        store=store_status,
    )


# --- Todos ---


@app.get("/api/todos", response_model=TodoListResponse, responses=_ERRORS)
async def list_todos(
    request: Request,
    service: TodoService = Depends(get_todo_service),
    owner_id: str = Depends(get_owner_id),
) -> TodoListResponse:
    with operation_failure("Failed to fetch todos", "todos_fetch_failed"):
        params = ListParams.from_query(request.query_params)
        page = service.list_todos(owner_id, params)
        p = page.pagination
        return TodoListResponse(
            items=[TodoResponse.model_validate(t) for t in page.items],
            pagination=PaginationResponse(
                page=p.page,
                limit=p.limit,
                total=p.total,
                total_pages=p.total_pages,
                has_next=p.has_next,
                has_prev=p.has_prev,
            ),
        )


@app.post("/api/todos", response_model=TodoResponse, responses=_ERRORS)
async def create_todo(
    request: Request,
    service: TodoService = Depends(get_todo_service),
    owner_id: str = Depends(get_owner_id),
) -> TodoResponse:
    with operation_failure("Failed to create todo", "todo_create_failed"):
        body = CreateTodoRequest.model_validate(await request.json())
        todo = service.create_todo(owner_id, body.task, body.category_id)
        return TodoResponse.model_validate(todo)


@app.put("/api/todos/{todo_id}", response_model=TodoResponse, responses=_ERRORS)
async def update_todo(
    todo_id: str,
    request: Request,
    service: TodoService = Depends(get_todo_service),
    owner_id: str = Depends(get_owner_id),
) -> TodoResponse:
    with operation_failure("Failed to update todo", "todo_update_failed", todo_id=todo_id):
        body = UpdateTodoRequest.model_validate(await request.json())
        todo = service.update_todo(owner_id, todo_id, completed=body.completed, task=body.task)
        return TodoResponse.model_validate(todo)


@app.delete("/api/todos/{todo_id}", response_model=SuccessResponse, responses=_ERRORS)
async def delete_todo(
    todo_id: str,
    service: TodoService = Depends(get_todo_service),
    owner_id: str = Depends(get_owner_id),
) -> SuccessResponse:
    with operation_failure("Failed to delete todo", "todo_delete_failed", todo_id=todo_id):
        service.delete_todo(owner_id, todo_id)
    return SuccessResponse()


# --- Categories ---


@app.get("/api/categories", response_model=list[CategoryResponse], responses=_ERRORS)
async def list_categories(
    service: CategoryService = Depends(get_category_service),
    owner_id: str = Depends(get_owner_id),
) -> list[CategoryResponse]:
    with operation_failure("Failed to fetch categories", "categories_fetch_failed"):
        categories = service.list_categories(owner_id)
        return [CategoryResponse.model_validate(c) for c in categories]


@app.post("/api/categories", response_model=CategoryResponse, responses=_ERRORS)
async def create_category(
    request: Request,
    service: CategoryService = Depends(get_category_service),
    owner_id: str = Depends(get_owner_id),
) -> CategoryResponse:
    with operation_failure("Failed to create category", "category_create_failed"):
        body = CreateCategoryRequest.model_validate(await request.json())
        category = service.create_category(owner_id, body.name, body.color)
        return CategoryResponse.model_validate(category)


@app.delete("/api/categories/{category_id}", response_model=SuccessResponse, responses=_ERRORS)
async def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
    owner_id: str = Depends(get_owner_id),
) -> SuccessResponse:
    with operation_failure(
        "Failed to delete category", "category_delete_failed", category_id=category_id
    ):
        service.delete_category(owner_id, category_id)
    return SuccessResponse()
