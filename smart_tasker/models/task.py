from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime
from pydantic import NaiveDatetime
from datetime import datetime, timezone
from uuid import uuid4
import enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Priority(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Recurrence(str, enum.Enum):
    NONE = "None"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class Task(SQLModel, table=True):
    """Task record.

    ``due_date`` is stored as a naive datetime in server-local time so that
    day-range queries line up with the server's calendar. Timestamps are
    naive UTC.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    priority: Priority = Field(default=Priority.MEDIUM)
    category: str = Field(default="General")
    due_date: NaiveDatetime = Field(sa_column=Column(DateTime, nullable=False, index=True))
    recurrence: Recurrence = Field(default=Recurrence.NONE)
    created_at: NaiveDatetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: NaiveDatetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
