"""
Authentication Routes
Signup, login, token refresh and profile fetch
"""

from fastapi import APIRouter
import logging

from eduverse.schemas.user import LoginRequest, RefreshRequest, SignupRequest
from eduverse.utils.dependencies import AccessToken, AuthServiceDep, CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup")
async def signup(payload: SignupRequest, auth_service: AuthServiceDep):
    """
    Register new user

    Stores name and role as identity metadata and, when the provider signs
    the user in immediately, creates the profile row.
    """
    user = await auth_service.signup(
        payload.email,
        payload.password,
        payload.name,
        payload.role
    )
    return {
        "success": True,
        "message": "Signup successful",
        "user": user.to_dict()
    }


@router.post("/login")
async def login(payload: LoginRequest, auth_service: AuthServiceDep):
    """Password login; returns the session and the user"""
    session = await auth_service.login(payload.email, payload.password)
    return {
        "success": True,
        "message": "Login successful",
        "session": session.to_dict(),
        "user": session.identity.to_dict()
    }


@router.post("/refresh")
async def refresh(payload: RefreshRequest, auth_service: AuthServiceDep):
    """Exchange a refresh token for a new session"""
    session = await auth_service.refresh(payload.refresh_token)
    return {
        "success": True,
        "session": session.to_dict()
    }


@router.get("/profile")
async def get_profile(current_user: CurrentUser, access_token: AccessToken, auth_service: AuthServiceDep):
    """Current user and profile, creating the profile on first access"""
    user, profile = await auth_service.get_profile(current_user, access_token)
    return {
        "success": True,
        "user": user.to_dict(),
        "profile": profile.to_dict()
    }
