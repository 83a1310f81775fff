"""Todo persistence: paginated listing and CRUD."""
import logging
from collections.abc import Iterator
from datetime import datetime

from sqlalchemy.orm import Session

from taskbell.errors import TodoNotFoundError
from taskbell.models.todo import Todo
from taskbell.schemas.todo import TodoCreate, TodoUpdate

logger = logging.getLogger(__name__)


def list_todos(db: Session, skip: int = 0, limit: int = 10) -> tuple[list[Todo], int]:
    """Get a page of todos, newest first, with the total count."""
    query = db.query(Todo)
    total = query.count()
    todos = (
        query.order_by(Todo.created_at.desc(), Todo.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return todos, total


def iter_all_todos(db: Session, page_size: int = 100) -> Iterator[Todo]:
    """Walk every todo page by page."""
    skip = 0
    while True:
        todos, total = list_todos(db, skip=skip, limit=page_size)
        yield from todos
        skip += page_size
        if not todos or skip >= total:
            return


def get_todo(db: Session, todo_id: str) -> Todo:
    todo = db.query(Todo).filter(Todo.id == todo_id).first()
    if not todo:
        raise TodoNotFoundError(todo_id)
    return todo


def create_todo(db: Session, data: TodoCreate) -> Todo:
    """Create a todo."""
    todo = Todo(**data.model_dump())
    if todo.completed:
        todo.completed_at = datetime.utcnow().isoformat()
    db.add(todo)
    db.commit()
    db.refresh(todo)
    logger.debug("Created todo %s", todo.id)
    return todo


def update_todo(db: Session, todo_id: str, data: TodoUpdate) -> Todo:
    """Apply the supplied fields to a todo.

    ``ongoing`` is reset when the update omits it, and ``completed_at``
    follows the ``completed`` flag.
    """
    todo = get_todo(db, todo_id)
    changes = data.model_dump(exclude_unset=True)
    for field in ("title", "description", "priority", "category"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    if changes.get("ongoing") is None:
        changes["ongoing"] = False

    if "completed" in changes:
        if changes["completed"] is True:
            changes["completed_at"] = datetime.utcnow().isoformat()
        elif changes["completed"] is False:
            changes["completed_at"] = None
        else:
            changes.pop("completed")

    for field, value in changes.items():
        setattr(todo, field, value)

    db.commit()
    db.refresh(todo)
    return todo


def delete_todo(db: Session, todo_id: str) -> None:
    todo = get_todo(db, todo_id)
    db.delete(todo)
    db.commit()


def delete_all_todos(db: Session) -> int:
    """Delete every todo. Returns the number of rows removed."""
    deleted = db.query(Todo).delete(synchronize_session=False)
    db.commit()
    return deleted


SNAPSHOT_FIELDS = (
    "id",
    "title",
    "completed",
    "ongoing",
    "start_date",
    "start_time",
    "end_date",
    "end_time",
)


def snapshot_all_todos(db: Session, page_size: int = 100) -> list[dict]:
    """Plain-dict copies of every todo, safe to use after the session closes."""
    return [
        {field: getattr(todo, field) for field in SNAPSHOT_FIELDS}
        for todo in iter_all_todos(db, page_size=page_size)
    ]
