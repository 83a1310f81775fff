"""Notification API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskbell.api.deps import Settings, get_db, get_settings
from taskbell.api.errors import server_error
from taskbell.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
    NotificationUpdate,
    SuccessResponse,
)
from taskbell.services.notifications import (
    create_notification_if_absent,
    delete_all_notifications,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
def get_notifications(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Get the most recent notifications."""
    try:
        notifications = list_notifications(db, limit=settings.notification_list_limit)
    except SQLAlchemyError:
        return server_error("Failed to fetch notifications")
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification_data: NotificationCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create a reminder, or return the existing one for the same task and type."""
    try:
        notification, created = create_notification_if_absent(
            db,
            notification_data.type,
            notification_data.task_id,
            notification_data.title,
            notification_data.message,
            notification_data.task_title,
        )
    except SQLAlchemyError:
        return server_error("Failed to create notification")

    if not created:
        response.status_code = status.HTTP_200_OK
    return NotificationResponse.model_validate(notification)


@router.put("", response_model=NotificationResponse | SuccessResponse)
def update_notifications(
    update: NotificationUpdate,
    db: Session = Depends(get_db),
):
    """Mark one notification as read, or all of them with ``mark_all_read``."""
    if not update.mark_all_read and not update.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide a notification id or mark_all_read",
        )

    try:
        if update.mark_all_read:
            mark_all_notifications_read(db)
            return SuccessResponse()
        notification = mark_notification_read(db, update.id)
    except SQLAlchemyError:
        return server_error("Failed to update notification")

    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.model_validate(notification)


@router.delete("", response_model=SuccessResponse)
def delete_notifications(
    id: str | None = None,
    db: Session = Depends(get_db),
):
    """Delete one notification by ``id``, or all of them when no id is given."""
    try:
        if id:
            delete_notification(db, id)
        else:
            delete_all_notifications(db)
    except SQLAlchemyError:
        return server_error("Failed to delete notification")
    return SuccessResponse()
