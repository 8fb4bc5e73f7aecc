"""
API v1 Router

All org-scoped endpoints are prefixed with /orgs/{orgSlug}.
"""

from fastapi import APIRouter
from . import members, tasks

router = APIRouter()

router.include_router(tasks.router, prefix="/orgs/{orgSlug}/tasks", tags=["Tasks"])
router.include_router(members.router, prefix="/orgs/{orgSlug}/members", tags=["Members"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/orgs/{orgSlug}/tasks",
            "/orgs/{orgSlug}/tasks/mine",
            "/orgs/{orgSlug}/tasks/{taskId}/status",
            "/orgs/{orgSlug}/members/assignable",
        ],
    }
