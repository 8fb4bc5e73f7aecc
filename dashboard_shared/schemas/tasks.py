"""Task-related Pydantic schemas for shared use across server and frontend codegen."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import TaskStatus


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class TaskCreate(BaseModel):
    """Request body for POST /tasks. The organization comes from the session."""
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    assigned_to_id: uuid.UUID
    due_date: Optional[datetime] = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class TaskStatusUpdate(BaseModel):
    """Request body for POST /tasks/{taskId}/status."""
    status: TaskStatus
    submission_details: Optional[str] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class AssigneeSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: Optional[str] = None
    image: Optional[str] = None


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    assigned_to_id: uuid.UUID
    due_date: Optional[datetime] = None
    submission_details: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TaskWithAssignee(TaskRead):
    assigned_to: AssigneeSummary

