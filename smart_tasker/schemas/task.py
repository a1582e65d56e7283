from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from ..models import Priority, Recurrence


def parse_due_date(value) -> datetime:
    """Parse an ISO-8601 date or datetime into a naive server-local datetime.

    A bare calendar date means local midnight. Aware datetimes are converted
    to local time before the tzinfo is dropped. Numbers are epoch
    milliseconds.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            raise ValueError("dueDate is out of range")
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("dueDate must be an ISO-8601 date or datetime")
    else:
        raise ValueError("dueDate must be an ISO-8601 date or datetime")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class TaskBase(BaseModel):
    """Fields shared by task requests and responses."""
    title: str
    priority: Priority = Priority.MEDIUM
    category: str = "General"
    due_date: datetime
    recurrence: Recurrence = Recurrence.NONE

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TaskCreate(TaskBase):
    """Schema for creating new tasks."""

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title is required")
        return value.strip()

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value):
        return parse_due_date(value)


class TaskUpdate(BaseModel):
    """Schema for updating existing tasks. Only the fields sent are replaced."""
    title: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    due_date: Optional[datetime] = None
    recurrence: Optional[Recurrence] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("title", "priority", "category", "due_date", "recurrence", mode="before")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{to_camel(info.field_name)} cannot be null")
        return value

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title is required")
        return value.strip()

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value):
        return parse_due_date(value)


class Task(TaskBase):
    """Complete task schema with all fields."""
    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class DashboardSummary(BaseModel):
    scheduledTasks: list[Task]
    deadlineReminders: list[Task]
    recurringTasks: list[Task]
    highPriorityTasks: list[Task]
