"""SQLAlchemy models package."""
from taskbell.models.todo import Todo
from taskbell.models.notification import Notification

__all__ = [
    "Todo",
    "Notification",
]
