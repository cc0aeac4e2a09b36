"""
Protected Routes
Endpoints gated by authentication and role
"""

from fastapi import APIRouter, Depends

from eduverse.models.user import Role
from eduverse.utils.dependencies import CurrentUser, require_role

router = APIRouter()


@router.get("/protected")
async def protected(current_user: CurrentUser):
    """Any authenticated user"""
    return {
        "success": True,
        "message": "Access granted to protected route",
        "user": current_user.summary()
    }


@router.get("/educator/dashboard", dependencies=[Depends(require_role(Role.EDUCATOR))])
async def educator_dashboard():
    return {
        "success": True,
        "message": "Welcome to the educator dashboard"
    }


@router.get("/admin/panel", dependencies=[Depends(require_role(Role.ADMIN))])
async def admin_panel():
    return {
        "success": True,
        "message": "Welcome to the admin panel"
    }
