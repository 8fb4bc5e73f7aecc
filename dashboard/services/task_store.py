"""
Task store: persistence for task rows.

Tasks carry no organization column. The store is the one place that derives
a task's organizations from its assignee's memberships, so callers only ever
see ``StoredTask.organization_ids`` or an organization-filtered listing.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dashboard.models.membership import Membership
from dashboard.models.task import Task
from dashboard.models.user import User
from dashboard_shared.schemas.common import TaskStatus


@dataclass(frozen=True)
class StoredTask:
    task: Task
    organization_ids: frozenset[uuid.UUID]

    def belongs_to(self, organization_id: uuid.UUID) -> bool:
        return organization_id in self.organization_ids


class TaskStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _members_of(self, organization_id: uuid.UUID):
        return select(Membership.user_id).where(
            Membership.organization_id == organization_id
        )

    async def get(self, task_id: uuid.UUID) -> Optional[StoredTask]:
        task = await self.session.get(Task, task_id)
        if task is None:
            return None
        result = await self.session.execute(
            select(Membership.organization_id).where(
                Membership.user_id == task.assigned_to_id
            )
        )
        return StoredTask(task=task, organization_ids=frozenset(r[0] for r in result.all()))

    async def insert(
        self,
        *,
        title: str,
        assigned_to_id: uuid.UUID,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            assigned_to_id=assigned_to_id,
            due_date=due_date,
            status=TaskStatus.PENDING.value,
            submission_details=None,
        )
        self.session.add(task)
        await self.session.flush()
        return task

    async def update_status(
        self,
        task: Task,
        status: TaskStatus,
        submission_details: Optional[str],
    ) -> Task:
        task.status = status.value
        task.submission_details = submission_details
        self.session.add(task)
        await self.session.flush()
        return task

    async def list_for_organization(
        self, organization_id: uuid.UUID
    ) -> list[tuple[Task, User]]:
        """Tasks whose assignee is a member of the organization, newest first."""
        result = await self.session.execute(
            select(Task, User)
            .join(User, User.id == Task.assigned_to_id)
            .where(Task.assigned_to_id.in_(self._members_of(organization_id)))
            .order_by(Task.created_at.desc())
        )
        return [(task, user) for task, user in result.all()]

    async def list_for_assignee(self, user_id: uuid.UUID) -> list[Task]:
        """Tasks assigned to the user, soonest due first, undated last."""
        result = await self.session.execute(
            select(Task)
            .where(Task.assigned_to_id == user_id)
            .order_by(Task.due_date.asc().nulls_last(), Task.created_at.asc())
        )
        return list(result.scalars().all())
