"""
Shared fixtures: an in-memory SQLite database per test and a seeded pair of
organizations.

Org Alpha: admin Ada, members Mia and Noah, plus Lee who is ADMIN here
           and MEMBER in Beta.
Org Beta:  admin Bo, member Pia.
"""

from __future__ import annotations

import os

os.environ.setdefault("DASH_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DASH_LOG_FORMAT", "console")

from dataclasses import dataclass
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import dashboard.models  # noqa: F401
from dashboard.core.auth import AuthenticatedUser
from dashboard.models.membership import Membership
from dashboard.models.organization import Organization
from dashboard.models.user import User
from dashboard.services.memberships import MembershipDirectory
from dashboard.services.task_store import TaskStore
from dashboard.services.tasks import TaskController
from dashboard_shared.schemas.common import Role

from .fakes import RecordingCache


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@dataclass
class World:
    alpha: Organization
    beta: Organization
    ada: User  # ADMIN in alpha
    mia: User  # MEMBER in alpha
    noah: User  # MEMBER in alpha
    lee: User  # ADMIN in alpha, MEMBER in beta
    bo: User  # ADMIN in beta
    pia: User  # MEMBER in beta

    def auth(self, user: User, org: Organization) -> AuthenticatedUser:
        return AuthenticatedUser(
            user_id=user.id,
            org_id=org.id,
            memberships=dict(self.memberships[user.id]),
        )

    @property
    def memberships(self) -> dict[uuid.UUID, dict[uuid.UUID, Role]]:
        return {
            self.ada.id: {self.alpha.id: Role.ADMIN},
            self.mia.id: {self.alpha.id: Role.MEMBER},
            self.noah.id: {self.alpha.id: Role.MEMBER},
            self.lee.id: {self.alpha.id: Role.ADMIN, self.beta.id: Role.MEMBER},
            self.bo.id: {self.beta.id: Role.ADMIN},
            self.pia.id: {self.beta.id: Role.MEMBER},
        }


async def seed_world(session: AsyncSession) -> World:
    alpha = Organization(name="Org Alpha", slug="org-alpha")
    beta = Organization(name="Org Beta", slug="org-beta")
    users = {
        key: User(name=name, email=f"{key}@example.com", image=f"https://img.example.com/{key}.png")
        for key, name in [
            ("ada", "Ada"),
            ("mia", "Mia"),
            ("noah", "Noah"),
            ("lee", "Lee"),
            ("bo", "Bo"),
            ("pia", "Pia"),
        ]
    }
    session.add_all([alpha, beta, *users.values()])
    await session.flush()

    world = World(alpha=alpha, beta=beta, **users)
    for user_id, roles in world.memberships.items():
        for org_id, role in roles.items():
            session.add(Membership(user_id=user_id, organization_id=org_id, role=role.value))
    await session.commit()
    return world


@pytest.fixture
async def world(session) -> World:
    return await seed_world(session)


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def controller_for(session, cache):
    """Build a TaskController for (user, org), sharing the test session."""

    def build(auth: AuthenticatedUser | None) -> TaskController:
        return TaskController(
            store=TaskStore(session),
            directory=MembershipDirectory(session),
            cache=cache,
            auth=auth,
        )

    return build
