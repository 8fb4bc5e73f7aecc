"""Membership schemas."""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel


class MemberSummary(BaseModel):
    """A user as listed in an assignee picker."""
    id: uuid.UUID
    name: Optional[str] = None
    email: Optional[str] = None


# Same shape, named for what the task creation form consumes.
AssignableMember = MemberSummary
