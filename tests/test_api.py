"""
HTTP tests for the task and member endpoints.

Runs the real FastAPI app over ASGITransport with the database session and
listing cache overridden; session revocation lookups are patched out.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from dashboard.core.auth import create_session_token
from dashboard.core.cache import get_task_cache
from dashboard.core.database import get_session
from dashboard.main import app


def bearer(user) -> dict[str, str]:
    token, _ = create_session_token(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(session_factory, cache):
    async def _session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_task_cache] = lambda: cache
    with patch("dashboard.core.auth.is_session_revoked", AsyncMock(return_value=False)):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_api_root(client: AsyncClient):
    response = await client.get("/api/v1/")
    assert response.status_code == 200
    data = response.json()
    assert data["api"] == "v1"
    assert "/orgs/{orgSlug}/tasks" in data["endpoints"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    generated = await client.get("/health")
    assert generated.headers["X-Request-ID"]


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_session(self, client, world):
        response = await client.get("/api/v1/orgs/org-alpha/tasks/mine")
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": {"kind": "unauthenticated", "message": "Authentication required."},
        }

    @pytest.mark.asyncio
    async def test_garbage_token(self, client, world):
        response = await client.get(
            "/api/v1/orgs/org-alpha/tasks/mine",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401
        assert response.json()["error"]["kind"] == "unauthenticated"

    @pytest.mark.asyncio
    async def test_session_cookie(self, client, world):
        token, _ = create_session_token(world.mia.id)
        client.cookies.set("dash_session", token)
        response = await client.get("/api/v1/orgs/org-alpha/tasks/mine")
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": []}

    @pytest.mark.asyncio
    async def test_revoked_session(self, client, world):
        with patch("dashboard.core.auth.is_session_revoked", AsyncMock(return_value=True)):
            response = await client.get(
                "/api/v1/orgs/org-alpha/tasks/mine", headers=bearer(world.mia)
            )
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Session has been revoked."

    @pytest.mark.asyncio
    async def test_unknown_organization(self, client, world):
        response = await client.get("/api/v1/orgs/nope/tasks/mine", headers=bearer(world.mia))
        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"

    @pytest.mark.asyncio
    async def test_non_member_sees_not_found(self, client, world):
        response = await client.get("/api/v1/orgs/org-alpha/tasks/mine", headers=bearer(world.pia))
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_assignable_members(client, world):
    response = await client.get(
        "/api/v1/orgs/org-alpha/members/assignable", headers=bearer(world.ada)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [m["name"] for m in body["data"]] == ["Mia", "Noah"]
    assert body["data"][0] == {
        "id": str(world.mia.id),
        "name": "Mia",
        "email": "mia@example.com",
    }


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TestTaskEndpoints:
    @pytest.mark.asyncio
    async def test_full_flow(self, client, world, cache):
        created = await client.post(
            "/api/v1/orgs/org-alpha/tasks",
            json={"title": "Draft Report", "assigned_to_id": str(world.mia.id)},
            headers=bearer(world.ada),
        )
        assert created.status_code == 201
        task = created.json()["data"]
        assert task["status"] == "PENDING"
        assert task["submission_details"] is None

        completed = await client.post(
            f"/api/v1/orgs/org-alpha/tasks/{task['id']}/status",
            json={"status": "COMPLETED", "submission_details": "done"},
            headers=bearer(world.mia),
        )
        assert completed.status_code == 200
        assert completed.json()["data"]["status"] == "COMPLETED"
        assert completed.json()["data"]["submission_details"] == "done"

        refused = await client.post(
            f"/api/v1/orgs/org-alpha/tasks/{task['id']}/status",
            json={"status": "IN_PROGRESS"},
            headers=bearer(world.noah),
        )
        assert refused.status_code == 403
        assert refused.json()["error"] == {
            "kind": "forbidden",
            "message": "You do not have permission to update this task.",
        }

        approved = await client.post(
            f"/api/v1/orgs/org-alpha/tasks/{task['id']}/status",
            json={"status": "APPROVED", "submission_details": "keep me"},
            headers=bearer(world.ada),
        )
        assert approved.json()["data"]["status"] == "APPROVED"
        assert approved.json()["data"]["submission_details"] is None

        listing = await client.get("/api/v1/orgs/org-alpha/tasks", headers=bearer(world.ada))
        rows = listing.json()["data"]
        assert [r["id"] for r in rows] == [task["id"]]
        assert rows[0]["assigned_to"]["name"] == "Mia"

    @pytest.mark.asyncio
    async def test_member_cannot_create(self, client, world):
        response = await client.post(
            "/api/v1/orgs/org-alpha/tasks",
            json={"title": "Mine", "assigned_to_id": str(world.noah.id)},
            headers=bearer(world.mia),
        )
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Only admins can create tasks."

    @pytest.mark.asyncio
    async def test_member_cannot_list_organization(self, client, world):
        response = await client.get("/api/v1/orgs/org-alpha/tasks", headers=bearer(world.mia))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_assignee_from_other_organization(self, client, world):
        response = await client.post(
            "/api/v1/orgs/org-alpha/tasks",
            json={"title": "Cross", "assigned_to_id": str(world.pia.id)},
            headers=bearer(world.ada),
        )
        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "", "assigned_to_id": str(uuid.uuid4())},
            {"title": "   ", "assigned_to_id": str(uuid.uuid4())},
            {"title": "No assignee"},
            {"title": "Bad id", "assigned_to_id": "not-a-uuid"},
            {"title": "Bad date", "assigned_to_id": str(uuid.uuid4()), "due_date": "soon"},
        ],
    )
    async def test_invalid_create_payload(self, client, world, payload):
        response = await client.post(
            "/api/v1/orgs/org-alpha/tasks", json=payload, headers=bearer(world.ada)
        )
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"]["kind"] == "validation"

    @pytest.mark.asyncio
    async def test_invalid_status_value(self, client, world):
        response = await client.post(
            f"/api/v1/orgs/org-alpha/tasks/{uuid.uuid4()}/status",
            json={"status": "DONE"},
            headers=bearer(world.ada),
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_task(self, client, world):
        response = await client.post(
            f"/api/v1/orgs/org-alpha/tasks/{uuid.uuid4()}/status",
            json={"status": "APPROVED"},
            headers=bearer(world.ada),
        )
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Task not found."

    @pytest.mark.asyncio
    async def test_listing_filters(self, client, world):
        for title, assignee in [("Draft Report", world.mia), ("Call bank", world.noah)]:
            await client.post(
                "/api/v1/orgs/org-alpha/tasks",
                json={"title": title, "assigned_to_id": str(assignee.id)},
                headers=bearer(world.ada),
            )

        by_title = await client.get(
            "/api/v1/orgs/org-alpha/tasks", params={"title": "report"}, headers=bearer(world.ada)
        )
        assert [r["title"] for r in by_title.json()["data"]] == ["Draft Report"]

        by_text = await client.get(
            "/api/v1/orgs/org-alpha/tasks", params={"q": "noah"}, headers=bearer(world.ada)
        )
        assert [r["title"] for r in by_text.json()["data"]] == ["Call bank"]

        mine = await client.get(
            "/api/v1/orgs/org-alpha/tasks/mine",
            params={"status": "PENDING"},
            headers=bearer(world.mia),
        )
        assert [r["title"] for r in mine.json()["data"]] == ["Draft Report"]
