"""
Authentication Service
Signup, login and profile reconciliation against the identity platform
"""

from typing import Optional, Tuple
import logging

from eduverse.models.user import Identity, Profile, Role, Session
from eduverse.services.providers import IdentityPlatform, ProviderError
from eduverse.utils.errors import (
    LoginFailed, ProfileFetchFailed, RefreshFailed, SignupFailed
)

logger = logging.getLogger(__name__)


class AuthService:
    """Auth flow orchestration: identity provider first, then the profile row"""

    def __init__(self, platform: IdentityPlatform, login_honors_metadata_role: bool = False):
        self.platform = platform
        self.login_honors_metadata_role = login_honors_metadata_role

    @staticmethod
    def _metadata_role(identity: Identity) -> Role:
        role = identity.role
        if role is None:
            logger.warning(
                f"User {identity.id} has no valid role in metadata "
                f"({identity.metadata.get('role')!r}), defaulting to student"
            )
            return Role.STUDENT
        return role

    async def signup(self, email: str, password: str, name: str, role: Role) -> Identity:
        """
        Register a user with the identity provider

        The profile row is written only when the provider returns a session
        right away. A failed profile write does not fail the signup; the row
        is created later by login or profile fetch.

        Returns:
            Identity: The created user
        """
        try:
            result = await self.platform.identity.sign_up(
                email, password, {"name": name, "role": role.value}
            )
        except Exception as e:
            logger.error(f"Signup error: {e}")
            raise SignupFailed(getattr(e, 'message', None) or str(e)) from e

        if result.session:
            profile = Profile(id=result.identity.id, name=name, role=role)
            try:
                async with self.platform.profiles(result.session.access_token) as store:
                    await store.insert_if_absent(profile)
            except Exception as e:
                logger.warning(f"Profile insert failed for {result.identity.id}: {e}")

        logger.info(f"Signup successful: {email}")
        return result.identity

    async def login(self, email: str, password: str) -> Session:
        """
        Sign in with email and password

        A missing profile is created on the way through. Its role is
        "student" unless login_honors_metadata_role is enabled, in which case
        the identity's metadata role is used like the profile fetch does.
        """
        try:
            session = await self.platform.identity.sign_in_with_password(email, password)
        except Exception as e:
            logger.error(f"Login error: {e}")
            raise LoginFailed(getattr(e, 'message', None) or str(e)) from e

        identity = session.identity
        try:
            async with self.platform.profiles(session.access_token) as store:
                if await store.get(identity.id) is None:
                    if self.login_honors_metadata_role:
                        role = self._metadata_role(identity)
                    else:
                        role = Role.STUDENT
                    await store.insert_if_absent(
                        Profile(id=identity.id, name=identity.name, role=role)
                    )
        except Exception as e:
            logger.warning(f"Profile reconciliation failed on login for {identity.id}: {e}")

        logger.info(f"Login successful: {email}")
        return session

    async def get_profile(self, identity: Identity, access_token: Optional[str]) -> Tuple[Identity, Profile]:
        """
        Resolve the profile of an already authenticated identity

        Creates the row from the identity's metadata (name and role) when it
        does not exist yet.
        """
        try:
            async with self.platform.profiles(access_token) as store:
                profile = await store.get(identity.id)
                if profile is None:
                    profile = await store.insert_if_absent(Profile(
                        id=identity.id,
                        name=identity.name,
                        role=self._metadata_role(identity)
                    ))
        except ProviderError as e:
            logger.error(f"Profile fetch error: {e.message}")
            raise ProfileFetchFailed(e.message) from e
        except Exception as e:
            logger.error(f"Profile fetch error: {e}")
            raise ProfileFetchFailed(str(e)) from e

        return identity, profile

    async def refresh(self, refresh_token: str) -> Session:
        """Exchange a refresh token for a new session"""
        try:
            return await self.platform.identity.refresh_session(refresh_token)
        except Exception as e:
            logger.error(f"Token refresh error: {e}")
            raise RefreshFailed(getattr(e, 'message', None) or str(e)) from e
