"""Notification store port and its database-backed implementation."""
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from taskbell.database import SessionLocal, get_db_context
from taskbell.errors import NotificationStoreError
from taskbell.schemas.notification import NotificationResponse
from taskbell.services import notifications as notification_service


class NotificationStore(Protocol):
    """Where the notification center persists reminders.

    Implementations raise NotificationStoreError for any storage or
    transport failure.
    """

    async def list(self) -> list[NotificationResponse]:
        ...

    async def create_if_absent(
        self,
        notification_type: str,
        task_id: str,
        title: str,
        message: str,
        task_title: str,
    ) -> NotificationResponse:
        ...

    async def mark_read(self, notification_id: str) -> None:
        ...

    async def mark_all_read(self) -> None:
        ...

    async def delete(self, notification_id: str) -> None:
        ...

    async def delete_all(self) -> None:
        ...


class DatabaseNotificationStore:
    """NotificationStore that talks to the database directly.

    Used by the server-side reminder poller. Each call opens its own session.
    """

    def __init__(self, session_factory: sessionmaker | None = None, limit: int = 100):
        self._session_factory = session_factory or SessionLocal
        self._limit = limit

    def _run(self, operation: str, func, *args):
        try:
            with get_db_context(self._session_factory) as db:
                return func(db, *args)
        except SQLAlchemyError as exc:
            raise NotificationStoreError(f"{operation} failed: {exc}") from exc

    async def list(self) -> list[NotificationResponse]:
        def _list(db: Session):
            rows = notification_service.list_notifications(db, limit=self._limit)
            return [NotificationResponse.model_validate(n) for n in rows]

        return self._run("list notifications", _list)

    async def create_if_absent(
        self,
        notification_type: str,
        task_id: str,
        title: str,
        message: str,
        task_title: str,
    ) -> NotificationResponse:
        def _create(db: Session):
            notification, _ = notification_service.create_notification_if_absent(
                db,
                notification_type,
                task_id,
                title,
                message,
                task_title,
            )
            return NotificationResponse.model_validate(notification)

        return self._run("create notification", _create)

    async def mark_read(self, notification_id: str) -> None:
        self._run("mark notification read", notification_service.mark_notification_read, notification_id)

    async def mark_all_read(self) -> None:
        self._run("mark all notifications read", notification_service.mark_all_notifications_read)

    async def delete(self, notification_id: str) -> None:
        self._run("delete notification", notification_service.delete_notification, notification_id)

    async def delete_all(self) -> None:
        self._run("delete all notifications", notification_service.delete_all_notifications)
