"""Domain exceptions."""


class TaskbellError(Exception):
    """Base class for Taskbell errors."""


class TodoNotFoundError(TaskbellError):
    """Raised when a todo id does not exist."""

    def __init__(self, todo_id: str):
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


class NotificationStoreError(TaskbellError):
    """Raised when the notification store cannot complete a request."""
