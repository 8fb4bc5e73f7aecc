"""
Task endpoints: admin listing, own tasks, creation, status updates.

Statuses: PENDING → IN_PROGRESS → REVIEW / COMPLETED → APPROVED
- Admins create tasks for MEMBERs of their organization and may set any status.
- Assignees may move their own task to IN_PROGRESS, REVIEW or COMPLETED;
  REVIEW and COMPLETED require submission details.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.core.auth import AuthenticatedUser, get_authenticated_user
from dashboard.core.cache import TaskCache, get_task_cache
from dashboard.core.database import get_session
from dashboard.services.memberships import MembershipDirectory
from dashboard.services.task_store import TaskStore
from dashboard.services.task_views import filter_task_rows
from dashboard.services.tasks import TaskController
from dashboard_shared.schemas.common import ActionSuccess, TaskStatus
from dashboard_shared.schemas.tasks import (
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
    TaskWithAssignee,
)

router = APIRouter()


async def get_task_controller(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
    cache: TaskCache = Depends(get_task_cache),
) -> TaskController:
    return TaskController(
        store=TaskStore(session),
        directory=MembershipDirectory(session),
        cache=cache,
        auth=auth,
    )


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@router.get("", response_model=ActionSuccess[List[TaskWithAssignee]])
async def list_org_tasks_endpoint(
    title: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    q: Optional[str] = None,
    controller: TaskController = Depends(get_task_controller),
):
    """All tasks of the organization, newest first (Admin only)."""
    tasks = await controller.get_admin_tasks()
    return ActionSuccess(data=filter_task_rows(tasks, title=title, status=status, query=q))


@router.get("/mine", response_model=ActionSuccess[List[TaskRead]])
async def list_own_tasks_endpoint(
    title: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    q: Optional[str] = None,
    controller: TaskController = Depends(get_task_controller),
):
    """Tasks assigned to the caller, soonest due first."""
    tasks = await controller.get_own_tasks()
    return ActionSuccess(data=filter_task_rows(tasks, title=title, status=status, query=q))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@router.post("", response_model=ActionSuccess[TaskRead], status_code=201)
async def create_task_endpoint(
    task_in: TaskCreate,
    controller: TaskController = Depends(get_task_controller),
):
    """Create a task for a member of the organization (Admin only)."""
    task = await controller.create(task_in)
    return ActionSuccess(data=task)


@router.post("/{task_id}/status", response_model=ActionSuccess[TaskRead])
async def update_task_status_endpoint(
    task_id: uuid.UUID,
    body: TaskStatusUpdate,
    controller: TaskController = Depends(get_task_controller),
):
    """Move a task to a new status."""
    task = await controller.update_status(task_id, body)
    return ActionSuccess(data=task)
