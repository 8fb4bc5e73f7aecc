from enum import Enum
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    COMPLETED = "COMPLETED"
    APPROVED = "APPROVED"


class Role(str, Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


# Statuses that carry submission details; every other status stores null.
SUBMISSION_STATUSES: frozenset["TaskStatus"] = frozenset(
    {TaskStatus.COMPLETED, TaskStatus.REVIEW}
)

# Statuses a non-admin assignee may move their own task into.
SELF_SERVICE_STATUSES: frozenset["TaskStatus"] = frozenset(
    {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.REVIEW}
)


class ErrorDetail(BaseModel):
    kind: str
    message: str


class ActionSuccess(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: T


class ActionFailure(BaseModel):
    success: Literal[False] = False
    error: ErrorDetail

