"""Notification persistence for todo reminders."""
import logging

from sqlalchemy.orm import Session

from taskbell.models.notification import Notification

logger = logging.getLogger(__name__)


def list_notifications(db: Session, limit: int = 100) -> list[Notification]:
    """Get the most recent notifications, newest first."""
    return (
        db.query(Notification)
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .all()
    )


def create_notification_if_absent(
    db: Session,
    notification_type: str,
    task_id: str,
    title: str,
    message: str,
    task_title: str,
) -> tuple[Notification, bool]:
    """Create a reminder unless one already exists for (task_id, type).

    Returns the notification and whether it was newly created. An existing
    record is returned unchanged.
    """
    existing = db.query(Notification).filter(
        Notification.task_id == task_id,
        Notification.type == notification_type,
    ).first()
    if existing:
        return existing, False

    notification = Notification(
        type=notification_type,
        task_id=task_id,
        title=title,
        message=message,
        task_title=task_title,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.info("Created %s notification for task %s", notification_type, task_id)
    return notification, True


def mark_notification_read(db: Session, notification_id: str) -> Notification | None:
    """Mark a notification as read. Returns None for an unknown id."""
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        return None
    if not notification.read:
        notification.read = True
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_notifications_read(db: Session) -> int:
    """Mark every unread notification as read. Returns rows changed."""
    updated = (
        db.query(Notification)
        .filter(Notification.read.is_(False))
        .update({"read": True}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, notification_id: str) -> bool:
    deleted = (
        db.query(Notification)
        .filter(Notification.id == notification_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return bool(deleted)


def delete_all_notifications(db: Session) -> int:
    deleted = db.query(Notification).delete(synchronize_session=False)
    db.commit()
    return deleted
