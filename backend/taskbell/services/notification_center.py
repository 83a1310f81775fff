"""Notification center: reminder evaluation plus the in-memory notification list.

One NotificationCenter per session. It owns:

- the list of notifications shown to the user, newest first
- the set of (task, reminder type) keys already fired this session, so
  repeated polls do not hit the store for reminders that already exist

The store's create-if-absent is the real guard against duplicates; the key
set only saves round trips. Mutations are applied locally first and rolled
back if the store call fails. Nothing here raises on store failures: they
are logged and the session carries on.
"""
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from taskbell.errors import NotificationStoreError
from taskbell.schemas.notification import NotificationResponse
from taskbell.services.notification_store import NotificationStore
from taskbell.services.reminders import (
    NOTIFICATION_THRESHOLD_MINUTES,
    ReminderCandidate,
    evaluate_reminders,
    notification_key,
)

logger = logging.getLogger(__name__)


class NotificationCenter:
    """Session-scoped reminder state and the operations the UI calls."""

    def __init__(
        self,
        store: NotificationStore,
        *,
        threshold_minutes: float = NOTIFICATION_THRESHOLD_MINUTES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._threshold_minutes = threshold_minutes
        self._clock = clock
        self._notifications: list[NotificationResponse] = []
        self._shown_keys: set[str] = set()
        self.is_loading = True
        self.loaded = False

    @property
    def notifications(self) -> list[NotificationResponse]:
        """Current notifications, most recent first."""
        return list(self._notifications)

    def unread_count(self) -> int:
        return sum(1 for n in self._notifications if not n.read)

    def has_fired(self, task_id: str, notification_type: str) -> bool:
        return notification_key(task_id, notification_type) in self._shown_keys

    async def load(self) -> None:
        """Hydrate from the store and remember which reminders already exist."""
        try:
            notifications = await self._store.list()
        except NotificationStoreError:
            logger.exception("Failed to load notifications")
            notifications = []
        else:
            for notification in notifications:
                self._shown_keys.add(notification_key(notification.task_id, notification.type))
        finally:
            self.is_loading = False
            self.loaded = True

        self._notifications = list(notifications)

    async def add(self, candidate: ReminderCandidate) -> NotificationResponse | None:
        """Persist one reminder unless this session already fired it.

        Returns the record when it was added to the list, otherwise None.
        """
        key = candidate.key
        if key in self._shown_keys:
            return None

        try:
            notification = await self._store.create_if_absent(
                candidate.type,
                candidate.task_id,
                candidate.title,
                candidate.message,
                candidate.task_title,
            )
        except NotificationStoreError:
            # Key stays uncommitted so the next pass retries.
            logger.exception("Failed to save notification %s", key)
            return None

        self._shown_keys.add(key)
        if any(n.id == notification.id for n in self._notifications):
            return None
        self._notifications.insert(0, notification)
        return notification

    async def evaluate(self, tasks: Iterable[Any], now: datetime | None = None) -> list[NotificationResponse]:
        """Run the reminder rules over ``tasks`` and persist new reminders.

        Returns the notifications added to the list by this pass.
        """
        now = now or self._clock()
        candidates = evaluate_reminders(tasks, now, self._threshold_minutes)

        added = []
        for candidate in candidates:
            notification = await self.add(candidate)
            if notification is not None:
                added.append(notification)

        if added:
            logger.info("Reminder pass added %d notification(s)", len(added))
        return added

    async def mark_read(self, notification_id: str) -> None:
        index = self._index_of(notification_id)
        if index is None or self._notifications[index].read:
            return

        self._notifications[index] = self._notifications[index].model_copy(update={"read": True})
        try:
            await self._store.mark_read(notification_id)
        except NotificationStoreError:
            logger.exception("Failed to mark notification %s as read", notification_id)
            index = self._index_of(notification_id)
            if index is not None:
                self._notifications[index] = self._notifications[index].model_copy(update={"read": False})

    async def mark_all_read(self) -> None:
        unread_ids = {n.id for n in self._notifications if not n.read}
        if not unread_ids:
            return

        self._notifications = [
            n.model_copy(update={"read": True}) if n.id in unread_ids else n
            for n in self._notifications
        ]
        try:
            await self._store.mark_all_read()
        except NotificationStoreError:
            logger.exception("Failed to mark all notifications as read")
            self._notifications = [
                n.model_copy(update={"read": False}) if n.id in unread_ids else n
                for n in self._notifications
            ]

    async def remove(self, notification_id: str) -> None:
        index = self._index_of(notification_id)
        if index is None:
            return

        removed = self._notifications.pop(index)
        try:
            await self._store.delete(notification_id)
        except NotificationStoreError:
            logger.exception("Failed to delete notification %s", notification_id)
            self._notifications.insert(min(index, len(self._notifications)), removed)

    async def clear_all(self) -> None:
        """Delete everything and forget which reminders fired.

        A todo that still meets a reminder condition will fire again on the
        next pass.
        """
        try:
            await self._store.delete_all()
        except NotificationStoreError:
            logger.exception("Failed to clear notifications")
            return

        self._notifications = []
        self._shown_keys.clear()

    def _index_of(self, notification_id: str) -> int | None:
        for index, notification in enumerate(self._notifications):
            if notification.id == notification_id:
                return index
        return None
