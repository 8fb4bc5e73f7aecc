"""
Membership endpoints.

GET /api/v1/orgs/{orgSlug}/members/assignable: candidates for new tasks
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard.core.auth import AuthenticatedUser, get_authenticated_user
from dashboard.core.database import get_session
from dashboard.services.assignment import get_assignable_members
from dashboard.services.memberships import MembershipDirectory
from dashboard_shared.schemas.common import ActionSuccess
from dashboard_shared.schemas.members import AssignableMember

router = APIRouter()


@router.get("/assignable", response_model=ActionSuccess[List[AssignableMember]])
async def list_assignable_members(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Members with the MEMBER role, sorted by name."""
    members = await get_assignable_members(MembershipDirectory(session), auth)
    return ActionSuccess(data=members)
