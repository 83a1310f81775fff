"""Notification model for task reminders."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Index, String, Text

from taskbell.database import Base


class Notification(Base):
    """In-app reminder about an upcoming or overdue todo."""

    __tablename__ = "notifications"
    __table_args__ = (
        # Lookup hint for create-if-absent; uniqueness is checked in the service
        Index("ix_notifications_task_type", "task_id", "type"),
        Index("ix_notifications_created", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Notification type: start_time, end_time, overdue
    type = Column(String(20), nullable=False)

    # Context (task_title is a snapshot taken at creation)
    task_id = Column(String(36), nullable=False)
    task_title = Column(String(255), nullable=False)

    # Content
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    # Status
    read = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
