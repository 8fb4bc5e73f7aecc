"""Assignment resolver: who can receive a new task."""

from __future__ import annotations

from typing import Optional

from dashboard.core.auth import AuthenticatedUser
from dashboard.core.errors import AuthenticationError
from dashboard.services.memberships import MembershipDirectory
from dashboard_shared.schemas.common import Role
from dashboard_shared.schemas.members import AssignableMember


async def get_assignable_members(
    directory: MembershipDirectory, auth: Optional[AuthenticatedUser]
) -> list[AssignableMember]:
    """Members with the MEMBER role in the caller's organization. Admins are excluded."""
    if auth is None or auth.org_id is None:
        raise AuthenticationError("An organization session is required.")
    return await directory.list_members_by_role(auth.org_id, Role.MEMBER)
