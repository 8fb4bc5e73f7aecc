"""
Task lifecycle controller: creation, status transitions and listings.

Status values: PENDING → IN_PROGRESS → REVIEW / COMPLETED → APPROVED
- Only admins create tasks, and only for members of their organization.
- Transitions are decided by ``policy.can_transition``.
- submission_details survives only on COMPLETED / REVIEW.
- Tasks outside the caller's organization are reported as not found.
- Writes invalidate the organization's cached listings after commit.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from pydantic import TypeAdapter

from dashboard.core.auth import AuthenticatedUser
from dashboard.core.cache import TaskCache, org_tag, task_tag
from dashboard.core.errors import AuthenticationError, ForbiddenError, NotFoundError
from dashboard.services.memberships import MembershipDirectory
from dashboard.services.policy import can_transition
from dashboard.services.task_store import TaskStore
from dashboard_shared.schemas.common import SUBMISSION_STATUSES, TaskStatus
from dashboard_shared.schemas.tasks import (
    AssigneeSummary,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
    TaskWithAssignee,
)

log = structlog.get_logger()

_task_listing = TypeAdapter(list[TaskWithAssignee])


class TaskController:
    """Request-scoped entry point for every task write and listing."""

    def __init__(
        self,
        store: TaskStore,
        directory: MembershipDirectory,
        cache: TaskCache,
        auth: Optional[AuthenticatedUser],
    ):
        self.store = store
        self.directory = directory
        self.cache = cache
        self.auth = auth

    def _session(self) -> AuthenticatedUser:
        if self.auth is None:
            raise AuthenticationError()
        return self.auth

    def _require_admin(self, message: str) -> AuthenticatedUser:
        auth = self._session()
        if not auth.is_admin:
            raise ForbiddenError(message)
        return auth

    async def _commit(self, *tags: str) -> None:
        await self.store.session.commit()
        await self.cache.invalidate(*tags)

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    async def create(self, task_in: TaskCreate) -> TaskRead:
        auth = self._require_admin("Only admins can create tasks.")

        if not await self.directory.is_member(task_in.assigned_to_id, auth.org_id):
            raise NotFoundError("Assigned user not found in this organization.")

        task = await self.store.insert(
            title=task_in.title,
            description=task_in.description,
            assigned_to_id=task_in.assigned_to_id,
            due_date=task_in.due_date,
        )
        org_ids = await self.directory.organization_ids_for_user(task.assigned_to_id)
        await self._commit(*(org_tag(o) for o in org_ids))
        await self.store.session.refresh(task)

        log.info(
            "task.created",
            task_id=str(task.id),
            assigned_to_id=str(task.assigned_to_id),
        )
        return TaskRead.model_validate(task)

    async def update_status(
        self, task_id: uuid.UUID, body: TaskStatusUpdate
    ) -> TaskRead:
        auth = self._session()

        stored = await self.store.get(task_id)
        if stored is None:
            raise NotFoundError("Task not found.")
        if not stored.belongs_to(auth.org_id):
            raise NotFoundError("Task not found in this organization.")

        task = stored.task
        from_status = TaskStatus(task.status)
        decision = can_transition(
            role=auth.role,
            is_assignee=task.assigned_to_id == auth.user_id,
            from_status=from_status,
            to_status=body.status,
            has_details=bool(body.submission_details),
        )
        if not decision:
            raise ForbiddenError(decision.reason)

        details = body.submission_details if body.status in SUBMISSION_STATUSES else None
        task = await self.store.update_status(task, body.status, details)
        await self._commit(
            *(org_tag(o) for o in stored.organization_ids), task_tag(task.id)
        )
        await self.store.session.refresh(task)

        log.info(
            "task.status_updated",
            task_id=str(task.id),
            from_status=from_status.value,
            to_status=body.status.value,
            by_admin=auth.is_admin,
        )
        return TaskRead.model_validate(task)

    # -----------------------------------------------------------------------
    # Listings
    # -----------------------------------------------------------------------

    async def get_admin_tasks(self) -> list[TaskWithAssignee]:
        auth = self._require_admin("Only admins can view all organization tasks.")
        tag = org_tag(auth.org_id)

        # Taken before the query so a write landing mid-read retires this fill.
        generation = await self.cache.generation(tag)
        if generation is not None:
            cached = await self.cache.get(tag, generation)
            if cached is not None:
                return _task_listing.validate_python(cached)

        rows = await self.store.list_for_organization(auth.org_id)
        tasks = [
            TaskWithAssignee(
                **TaskRead.model_validate(task).model_dump(),
                assigned_to=AssigneeSummary.model_validate(user),
            )
            for task, user in rows
        ]
        if generation is not None:
            await self.cache.set(
                tag, generation, _task_listing.dump_python(tasks, mode="json")
            )
        return tasks

    async def get_own_tasks(self) -> list[TaskRead]:
        auth = self._session()
        tasks = await self.store.list_for_assignee(auth.user_id)
        return [TaskRead.model_validate(t) for t in tasks]
