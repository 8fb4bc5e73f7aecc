"""
Membership directory: who belongs to an organization, and with which role.

Read only. Every query takes the request's session explicitly.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dashboard.models.membership import Membership
from dashboard.models.user import User
from dashboard_shared.schemas.common import Role
from dashboard_shared.schemas.members import MemberSummary


class MembershipDirectory:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_role(
        self, user_id: uuid.UUID, organization_id: uuid.UUID
    ) -> Optional[Role]:
        result = await self.session.execute(
            select(Membership.role).where(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
        )
        role = result.scalar_one_or_none()
        return Role(role) if role is not None else None

    async def is_member(self, user_id: uuid.UUID, organization_id: uuid.UUID) -> bool:
        return await self.find_role(user_id, organization_id) is not None

    async def list_members_by_role(
        self, organization_id: uuid.UUID, role: Role
    ) -> list[MemberSummary]:
        """Members holding ``role``, by name (unnamed last), then join order."""
        result = await self.session.execute(
            select(User.id, User.name, User.email)
            .join(Membership, Membership.user_id == User.id)
            .where(
                Membership.organization_id == organization_id,
                Membership.role == role.value,
            )
            .order_by(User.name.asc().nulls_last(), Membership.id.asc())
        )
        return [
            MemberSummary(id=user_id, name=name, email=email)
            for user_id, name, email in result.all()
        ]

    async def organization_ids_for_user(self, user_id: uuid.UUID) -> frozenset[uuid.UUID]:
        result = await self.session.execute(
            select(Membership.organization_id).where(Membership.user_id == user_id)
        )
        return frozenset(row[0] for row in result.all())
