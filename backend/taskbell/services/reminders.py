"""Reminder rules for todos.

Turns a set of todos and the current wall-clock time into reminder
candidates (start soon, end soon, overdue). Nothing here touches the
database or the network: the notification center decides which candidates
actually get persisted.
"""
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

NOTIFICATION_THRESHOLD_MINUTES = 15

START_TIME = "start_time"
END_TIME = "end_time"
OVERDUE = "overdue"
NOTIFICATION_TYPES = (START_TIME, END_TIME, OVERDUE)

NOTIFICATION_TITLES = {
    START_TIME: "Task Starting Soon",
    END_TIME: "Task Ending Soon",
    OVERDUE: "Task Overdue",
}

# Display-only default for a deadline given as a bare date
END_OF_DAY = "23:59:59"

# Stored todos use snake_case, payloads from the web client may use camelCase
_CAMEL_FIELDS = {
    "id": "_id",
    "start_date": "startDate",
    "start_time": "startTime",
    "end_date": "endDate",
    "end_time": "endTime",
}


@dataclass(frozen=True)
class ReminderCandidate:
    """A reminder the rules say should exist for a todo right now."""

    type: str
    task_id: str
    task_title: str
    title: str
    message: str

    @property
    def key(self) -> str:
        return notification_key(self.task_id, self.type)


def notification_key(task_id: str, notification_type: str) -> str:
    """Dedup key for a (task, reminder type) pair."""
    return f"{task_id}-{notification_type}"


def task_field(task: Any, name: str, default: Any = None) -> Any:
    """Read a field from an ORM row, a pydantic model or a plain mapping."""
    if isinstance(task, Mapping):
        if name in task:
            return task[name]
        camel = _CAMEL_FIELDS.get(name)
        if camel and camel in task:
            return task[camel]
        return default
    return getattr(task, name, default)


def js_round(value: float) -> int:
    """Round half up, the way the web client displays numbers."""
    return math.floor(value + 0.5)


def combine_date_time(date_part: str | None, time_part: str | None) -> datetime | None:
    """Join a YYYY-MM-DD date and an HH:MM time into a naive datetime.

    Returns None when either part is missing or the result does not parse.
    """
    if not date_part or not time_part:
        return None
    try:
        return datetime.fromisoformat(f"{date_part.strip()}T{time_part.strip()}")
    except ValueError:
        return None


def _local_naive(now: datetime) -> datetime:
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def _minutes_between(later: datetime, earlier: datetime) -> float:
    return (later - earlier).total_seconds() / 60


def format_overdue(overdue_minutes: float) -> str:
    """Human text for how long a todo has been overdue."""
    minutes = js_round(overdue_minutes)
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''}"
    hours = js_round(minutes / 60)
    return f"{hours} hour{'s' if hours > 1 else ''}"


def _candidate(notification_type: str, task_id: str, task_title: str, message: str) -> ReminderCandidate:
    return ReminderCandidate(
        type=notification_type,
        task_id=task_id,
        task_title=task_title,
        title=NOTIFICATION_TITLES[notification_type],
        message=message,
    )


def evaluate_task(
    task: Any,
    now: datetime,
    threshold_minutes: float = NOTIFICATION_THRESHOLD_MINUTES,
) -> list[ReminderCandidate]:
    """Reminder candidates for a single todo at ``now``."""
    if task_field(task, "completed", False):
        return []

    task_id = str(task_field(task, "id"))
    title = task_field(task, "title", "") or ""
    now = _local_naive(now)

    start_at = combine_date_time(task_field(task, "start_date"), task_field(task, "start_time"))
    # A bare end date never produces end or overdue reminders here.
    end_at = combine_date_time(task_field(task, "end_date"), task_field(task, "end_time"))

    candidates = []

    if start_at and not task_field(task, "ongoing", False):
        minutes_before = _minutes_between(start_at, now)
        if 0 < minutes_before <= threshold_minutes:
            candidates.append(_candidate(
                START_TIME,
                task_id,
                title,
                f'"{title}" is starting in {js_round(minutes_before)} minutes',
            ))

    if end_at:
        minutes_before = _minutes_between(end_at, now)
        if 0 < minutes_before <= threshold_minutes:
            candidates.append(_candidate(
                END_TIME,
                task_id,
                title,
                f'"{title}" is ending in {js_round(minutes_before)} minutes',
            ))

    if end_at and now > end_at:
        candidates.append(_candidate(
            OVERDUE,
            task_id,
            title,
            f'"{title}" is overdue by {format_overdue(_minutes_between(now, end_at))}',
        ))

    return candidates


def evaluate_reminders(
    tasks: Iterable[Any],
    now: datetime,
    threshold_minutes: float = NOTIFICATION_THRESHOLD_MINUTES,
) -> list[ReminderCandidate]:
    """Reminder candidates for every todo, in input order."""
    candidates = []
    for task in tasks:
        candidates.extend(evaluate_task(task, now, threshold_minutes))
    return candidates


def is_display_overdue(task: Any, now: datetime) -> bool:
    """Overdue flag used for styling todo lists.

    Unlike the reminder rules, a deadline without a time counts as the end
    of that day.
    TODO: decide whether reminders should also default bare end dates to
    end of day, then share one deadline helper between both paths.
    """
    if task_field(task, "completed", False):
        return False
    end_date = task_field(task, "end_date")
    if not end_date:
        return False
    deadline = combine_date_time(end_date, task_field(task, "end_time") or END_OF_DAY)
    if deadline is None:
        return False
    return _local_naive(now) > deadline


def task_display_status(task: Any, now: datetime) -> str:
    """Computed status shown next to a todo: completed, ongoing, overdue or pending."""
    if task_field(task, "completed", False):
        return "completed"
    if task_field(task, "ongoing", False):
        return "ongoing"
    if is_display_overdue(task, now):
        return "overdue"
    return "pending"
