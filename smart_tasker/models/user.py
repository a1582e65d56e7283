from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime
from pydantic import NaiveDatetime
from uuid import uuid4

from .task import utcnow


class User(SQLModel, table=True):
    """Credential record: one row per registered email."""
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    created_at: NaiveDatetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
