"""Task model. Organization is derived from the assignee's memberships."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Task(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "tasks"

    title: str = Field(nullable=False)
    description: Optional[str] = Field(default=None, sa_type=sa.Text)
    status: str = Field(nullable=False, default="PENDING", index=True)  # PENDING | IN_PROGRESS | REVIEW | COMPLETED | APPROVED
    assigned_to_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    due_date: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    submission_details: Optional[str] = Field(default=None, sa_type=sa.Text)
