#!/usr/bin/env python3
"""Seed a development database with an organization, an admin, two members and tasks.

Usage:
    python scripts/seed_dev_data.py

Requires DASH_DATABASE_URL (or defaults to localhost). Prints a session token
per user so the API can be called with ``Authorization: Bearer <token>``.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import structlog

from dashboard.core.auth import create_session_token
from dashboard.core.config import get_settings
from dashboard.core.database import get_session_context, init_db
from dashboard.core.logging_setup import configure_logging
from dashboard.models import Membership, Organization, Task, User

log = structlog.get_logger()

# Deterministic UUIDs for reproducibility
ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
MEMBER_IDS = [uuid.UUID(f"00000000-0000-0000-0000-0000000000{i}") for i in (11, 12)]
TASK_IDS = [uuid.UUID(f"00000000-0000-0000-0000-0000000002{i:02d}") for i in range(4)]


async def seed():
    await init_db()
    now = datetime.now(timezone.utc)

    async with get_session_context() as session:
        if await session.get(Organization, ORG_ID):
            log.info("seed.skipped", reason="organization already exists")
            return

        session.add(Organization(id=ORG_ID, name="Acme Studio", slug="acme-studio"))
        session.add(User(id=ADMIN_ID, name="Alice Admin", email="alice@acme.dev"))
        for member_id, name in zip(MEMBER_IDS, ["Mark Member", "Nina Member"]):
            session.add(User(id=member_id, name=name, email=f"{name.split()[0].lower()}@acme.dev"))
        await session.flush()

        session.add(Membership(user_id=ADMIN_ID, organization_id=ORG_ID, role="ADMIN"))
        for member_id in MEMBER_IDS:
            session.add(Membership(user_id=member_id, organization_id=ORG_ID, role="MEMBER"))

        tasks = [
            ("Draft Report", MEMBER_IDS[0], "PENDING", None, now + timedelta(days=3)),
            ("Update contact list", MEMBER_IDS[0], "IN_PROGRESS", None, None),
            ("Prepare invoice batch", MEMBER_IDS[1], "REVIEW", "Invoices in shared drive", now + timedelta(days=1)),
            ("Publish newsletter", MEMBER_IDS[1], "APPROVED", None, None),
        ]
        for task_id, (title, assignee, status, details, due) in zip(TASK_IDS, tasks):
            session.add(
                Task(
                    id=task_id,
                    title=title,
                    assigned_to_id=assignee,
                    status=status,
                    submission_details=details,
                    due_date=due,
                )
            )

    log.info("seed.done", org_slug="acme-studio", tasks=len(TASK_IDS))
    for user_id in [ADMIN_ID, *MEMBER_IDS]:
        token, _ = create_session_token(user_id, expires_delta=timedelta(days=7))
        print(f"{user_id}: {token}")


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings, "console")
    asyncio.run(seed())
