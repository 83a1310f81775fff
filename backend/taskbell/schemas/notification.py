"""Notification schemas."""
from typing import Literal

from pydantic import BaseModel

NotificationType = Literal["start_time", "end_time", "overdue"]


class NotificationCreate(BaseModel):
    """Create-or-return-existing request for a reminder."""

    type: NotificationType
    task_id: str
    title: str
    message: str
    task_title: str


class NotificationUpdate(BaseModel):
    """Mark one notification (by id) or all notifications as read."""

    id: str | None = None
    mark_all_read: bool = False


class NotificationResponse(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    task_id: str
    task_title: str
    read: bool
    created_at: str

    class Config:
        from_attributes = True


class SuccessResponse(BaseModel):
    success: bool = True
