"""Todo model."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Index, String, Text

from taskbell.database import Base


class Todo(Base):
    """A user task with an optional scheduling window."""

    __tablename__ = "todos"
    __table_args__ = (
        Index("ix_todos_created", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")

    # Status
    completed = Column(Boolean, default=False, nullable=False)
    ongoing = Column(Boolean, default=False, nullable=False)
    completed_at = Column(String(26))

    # Classification
    priority = Column(String(10), default="medium")  # high, medium, low
    category = Column(String(50), default="Personal")

    # Scheduling
    start_date = Column(String(10))  # YYYY-MM-DD
    start_time = Column(String(8))  # HH:MM
    end_date = Column(String(10))  # YYYY-MM-DD
    end_time = Column(String(8))  # HH:MM

    # Timestamps
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())
