"""
Session context for organization-scoped requests.

Sessions are issued elsewhere (login, OAuth). This module only:
- verifies the signed session JWT (cookie or Bearer header)
- checks the Redis revocation list
- resolves the organization addressed by the URL and the caller's memberships
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dashboard.core.config import get_settings
from dashboard.core.database import get_session
from dashboard.core.errors import AuthenticationError, NotFoundError
from dashboard.core.redis import get_redis
from dashboard.models.membership import Membership
from dashboard.models.organization import Organization
from dashboard_shared.schemas.common import Role

log = structlog.get_logger()
settings = get_settings()

authorization_header = APIKeyHeader(name="Authorization", auto_error=False)

REVOKED_KEY_PREFIX = "dash:session:revoked:"


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_session_token(
    user_id: uuid.UUID,
    *,
    expires_delta: timedelta | None = None,
) -> tuple[str, str]:
    """Create a signed session JWT. Returns (token, jti)."""
    jti = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": exp,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def decode_session_token(token: str) -> dict:
    """Decode and verify a session JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


async def is_session_revoked(jti: str) -> bool:
    """Check if a session id has been put on the revocation list."""
    redis = await get_redis()
    return await redis.exists(f"{REVOKED_KEY_PREFIX}{jti}") > 0


# ---------------------------------------------------------------------------
# Session context
# ---------------------------------------------------------------------------

class AuthenticatedUser:
    """The caller, the organization in scope, and every membership they hold."""

    def __init__(
        self,
        user_id: uuid.UUID,
        org_id: uuid.UUID,
        memberships: dict[uuid.UUID, Role],
    ):
        self.user_id = user_id
        self.org_id = org_id
        self.memberships = memberships
        self.role: Optional[Role] = memberships.get(org_id)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __repr__(self) -> str:
        return f"AuthenticatedUser(user_id={self.user_id}, org_id={self.org_id}, role={self.role})"


async def _resolve_org(org_slug: str, session: AsyncSession) -> Organization:
    result = await session.execute(
        select(Organization).where(Organization.slug == org_slug)
    )
    org = result.scalar_one_or_none()
    if not org:
        raise NotFoundError("Organization not found.")
    return org


def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return request.cookies.get(settings.session_cookie_name)


async def load_session_context(
    token: str, org: Organization, session: AsyncSession
) -> AuthenticatedUser:
    """Verify a session token and build the caller's context for ``org``."""
    try:
        payload = decode_session_token(token)
        user_id = uuid.UUID(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise AuthenticationError("Invalid or expired session.")

    jti = payload.get("jti")
    if jti and await is_session_revoked(jti):
        raise AuthenticationError("Session has been revoked.")

    result = await session.execute(
        select(Membership.organization_id, Membership.role).where(
            Membership.user_id == user_id
        )
    )
    memberships = {org_id: Role(role) for org_id, role in result.all()}

    # Non-members get the same answer as a missing organization.
    if org.id not in memberships:
        raise NotFoundError("Organization not found.")

    return AuthenticatedUser(user_id=user_id, org_id=org.id, memberships=memberships)


async def get_authenticated_user(
    request: Request,
    orgSlug: str,
    authorization: Optional[str] = Depends(authorization_header),
    session: AsyncSession = Depends(get_session),
) -> AuthenticatedUser:
    """Main authentication dependency for routes under /orgs/{orgSlug}."""
    org = await _resolve_org(orgSlug, session)

    token = _extract_token(request, authorization)
    if not token:
        raise AuthenticationError()

    auth = await load_session_context(token, org, session)
    request.state.auth = auth
    structlog.contextvars.bind_contextvars(
        user_id=str(auth.user_id), org_id=str(auth.org_id)
    )
    return auth
