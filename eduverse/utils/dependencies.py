"""
FastAPI Dependencies
Platform injection, bearer token authentication and role gates
"""

from fastapi import Depends, Header, Request
from typing import Annotated, Callable, Optional
import logging

from eduverse.config import Settings
from eduverse.models.user import Identity, Role
from eduverse.services.auth_service import AuthService
from eduverse.services.providers import IdentityPlatform
from eduverse.utils.errors import Forbidden, GatewayError, InvalidToken, MissingToken

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


def get_platform(request: Request) -> IdentityPlatform:
    """Identity platform the application was created with"""
    return request.app.state.platform


def get_auth_service(
    platform: IdentityPlatform = Depends(get_platform),
    settings: Settings = Depends(get_app_settings)
) -> AuthService:
    """Request-scoped auth flow"""
    return AuthService(platform, login_honors_metadata_role=settings.login_honors_metadata_role)


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the second whitespace-separated segment of the header"""
    if not authorization:
        return None
    parts = authorization.split()
    return parts[1] if len(parts) > 1 else None


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    platform: IdentityPlatform = Depends(get_platform)
) -> Identity:
    """
    Resolve the bearer token to an identity

    The identity and token are stored on request.state for later handlers.

    Raises:
        MissingToken: No token in the Authorization header
        InvalidToken: The provider rejected the token
    """
    token = extract_token(authorization)
    if not token:
        raise MissingToken()

    try:
        identity = await platform.identity.get_user(token)
    except GatewayError as e:
        logger.warning(f"Token verification unavailable: {e.message}")
        raise InvalidToken() from e
    except Exception as e:
        logger.info(f"Token rejected: {e}")
        raise InvalidToken() from e

    request.state.user = identity
    request.state.access_token = token
    return identity


def require_role(*allowed_roles: Role) -> Callable:
    """
    Return a dependency admitting only identities with one of the given roles

    Example:
        @router.get("/admin/panel", dependencies=[Depends(require_role(Role.ADMIN))])
    """
    allowed = frozenset(allowed_roles)

    async def _checker(
        request: Request,
        user: Identity = Depends(get_current_user)
    ) -> Identity:
        identity = getattr(request.state, 'user', None) or user
        role = identity.role if identity else None
        if role not in allowed:
            raise Forbidden.for_roles(allowed_roles)
        return identity

    return _checker


def get_access_token(request: Request) -> Optional[str]:
    """Bearer token resolved by get_current_user"""
    return getattr(request.state, 'access_token', None)


# Type aliases for cleaner dependency injection
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PlatformDep = Annotated[IdentityPlatform, Depends(get_platform)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
CurrentUser = Annotated[Identity, Depends(get_current_user)]
AccessToken = Annotated[Optional[str], Depends(get_access_token)]
