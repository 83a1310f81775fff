"""Todo API endpoints."""
from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskbell.api.deps import Settings, get_db, get_settings
from taskbell.api.errors import server_error
from taskbell.errors import TodoNotFoundError
from taskbell.models.todo import Todo
from taskbell.schemas.todo import (
    MessageResponse,
    Pagination,
    TodoCreate,
    TodoListResponse,
    TodoResponse,
    TodoUpdate,
)
from taskbell.services import todos as todo_service
from taskbell.services.reminders import task_display_status

router = APIRouter(prefix="/todos", tags=["todos"])


def to_response(todo: Todo, now: datetime | None = None) -> TodoResponse:
    """Build a todo response with its computed display status."""
    return TodoResponse(
        id=todo.id,
        title=todo.title,
        description=todo.description,
        completed=bool(todo.completed),
        ongoing=bool(todo.ongoing),
        priority=todo.priority,
        category=todo.category,
        start_date=todo.start_date,
        start_time=todo.start_time,
        end_date=todo.end_date,
        end_time=todo.end_time,
        completed_at=todo.completed_at,
        created_at=todo.created_at,
        updated_at=todo.updated_at,
        status=task_display_status(todo, now or datetime.now()),
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Todo not found",
    )


def _schedule_reminder_check(request: Request, background_tasks: BackgroundTasks) -> None:
    """Run a reminder pass once the response is sent, when the poller is running."""
    check = getattr(request.app.state, "reminder_check", None)
    if check is not None:
        background_tasks.add_task(check)


@router.get("", response_model=TodoListResponse)
def list_todos(
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """List todos, newest first."""
    limit = min(limit or settings.todo_page_size, settings.todo_max_page_size)
    try:
        todos, total = todo_service.list_todos(db, skip=skip, limit=limit)
    except SQLAlchemyError:
        return server_error("Failed to fetch todos")

    now = datetime.now()
    return TodoListResponse(
        todos=[to_response(t, now) for t in todos],
        pagination=Pagination(
            total=total,
            skip=skip,
            limit=limit,
            has_more=skip + limit < total,
        ),
    )


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def create_todo(
    todo_data: TodoCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Create a todo."""
    try:
        todo = todo_service.create_todo(db, todo_data)
    except SQLAlchemyError:
        return server_error("Failed to create todo")
    _schedule_reminder_check(request, background_tasks)
    return to_response(todo)


@router.delete("", response_model=MessageResponse)
def delete_all_todos(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Delete every todo."""
    try:
        todo_service.delete_all_todos(db)
    except SQLAlchemyError:
        return server_error("Failed to delete todos")
    _schedule_reminder_check(request, background_tasks)
    return MessageResponse(message="All todos deleted")


@router.get("/{todo_id}", response_model=TodoResponse)
def get_todo(todo_id: str, db: Session = Depends(get_db)):
    try:
        todo = todo_service.get_todo(db, todo_id)
    except TodoNotFoundError:
        raise _not_found()
    except SQLAlchemyError:
        return server_error("Failed to fetch todo")
    return to_response(todo)


@router.put("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    todo_data: TodoUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Update a todo. Omitting ``ongoing`` resets it."""
    try:
        todo = todo_service.update_todo(db, todo_id, todo_data)
    except TodoNotFoundError:
        raise _not_found()
    except SQLAlchemyError:
        return server_error("Failed to update todo")
    _schedule_reminder_check(request, background_tasks)
    return to_response(todo)


@router.delete("/{todo_id}", response_model=MessageResponse)
def delete_todo(
    todo_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    try:
        todo_service.delete_todo(db, todo_id)
    except TodoNotFoundError:
        raise _not_found()
    except SQLAlchemyError:
        return server_error("Failed to delete todo")
    _schedule_reminder_check(request, background_tasks)
    return MessageResponse(message="Todo deleted")
