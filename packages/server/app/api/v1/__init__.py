"""
API v1 Router

Member and task endpoints require a bearer token; tasks nest under their member.
"""

from fastapi import APIRouter
from . import auth, members, tasks

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(members.router, prefix="/members", tags=["Members"])
router.include_router(tasks.router, prefix="/members/{memberId}/tasks", tags=["Tasks"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/auth/signup",
            "/auth/login",
            "/auth/me",
            "/members",
            "/members/{memberId}",
            "/members/{memberId}/tasks",
            "/members/{memberId}/tasks/{taskId}",
        ],
    }
