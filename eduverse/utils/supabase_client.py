"""
Supabase Client Configuration
Identity and profile storage backed by a Supabase project
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar
import logging

from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from eduverse.config import Settings
from eduverse.models.user import Identity, Profile, Session, SignUpResult
from eduverse.services.providers import (
    IdentityPlatform, IdentityProvider, IdentityProviderError, ProfileStore, ProfileStoreError
)
from eduverse.utils.errors import ProviderUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgREST answer for .single() when the filter matched zero rows
NO_ROWS_CODE = "PGRST116"


def identity_from_user(user: Any) -> Identity:
    """Convert a Supabase auth user into an Identity"""
    return Identity(
        id=str(user.id),
        email=user.email,
        metadata=dict(user.user_metadata or {})
    )


def session_from_auth(session: Any, user: Any = None) -> Session:
    """Convert a Supabase auth session into a Session"""
    return Session(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        token_type=session.token_type or "bearer",
        expires_in=session.expires_in,
        expires_at=session.expires_at,
        identity=identity_from_user(user or session.user)
    )


async def _run(func: Callable[..., T], *args) -> T:
    """Run a blocking client call off the event loop"""
    return await asyncio.to_thread(func, *args)


def release_client(client: Client):
    """Close the HTTP sessions opened by a throwaway client"""
    postgrest = getattr(client, "_postgrest", None)
    sessions = [
        getattr(postgrest, "session", None),
        getattr(getattr(client, "auth", None), "_http_client", None)
    ]
    for session in sessions:
        if session is None:
            continue
        try:
            session.close()
        except Exception as e:
            logger.debug(f"Failed to close Supabase HTTP session: {e}")


class SupabaseIdentityProvider(IdentityProvider):
    """Supabase Auth adapter"""

    def __init__(self, supabase: "SupabaseClient"):
        self.supabase = supabase

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> SignUpResult:
        # Session-establishing calls use a throwaway client so no user session
        # is ever stored on the shared anon client.
        client = self.supabase.new_client()
        try:
            response = await _run(client.auth.sign_up, {
                "email": email,
                "password": password,
                "options": {
                    "data": metadata
                }
            })
        except Exception as e:
            logger.error(f"Supabase sign up error: {e}")
            raise IdentityProviderError(str(e), getattr(e, 'code', None)) from e
        finally:
            release_client(client)

        if not response.user:
            raise IdentityProviderError("Failed to create account")

        identity = identity_from_user(response.user)
        session = session_from_auth(response.session, response.user) if response.session else None
        logger.info(f"User signed up: {email} (session issued: {session is not None})")
        return SignUpResult(identity=identity, session=session)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        client = self.supabase.new_client()
        try:
            response = await _run(client.auth.sign_in_with_password, {
                "email": email,
                "password": password
            })
        except Exception as e:
            logger.error(f"Supabase sign in error: {e}")
            raise IdentityProviderError(str(e), getattr(e, 'code', None)) from e
        finally:
            release_client(client)

        if not (response.user and response.session):
            raise IdentityProviderError("Invalid login credentials")

        logger.info(f"User signed in: {email}")
        return session_from_auth(response.session, response.user)

    async def get_user(self, access_token: str) -> Identity:
        client = self.supabase.get_client()
        try:
            response = await _run(client.auth.get_user, access_token)
        except Exception as e:
            logger.warning(f"Token verification error: {e}")
            raise IdentityProviderError(str(e), getattr(e, 'code', None)) from e

        if not response or not response.user:
            raise IdentityProviderError("Invalid token")
        return identity_from_user(response.user)

    async def refresh_session(self, refresh_token: str) -> Session:
        client = self.supabase.new_client()
        try:
            response = await _run(client.auth.refresh_session, refresh_token)
        except Exception as e:
            logger.error(f"Session refresh error: {e}")
            raise IdentityProviderError(str(e), getattr(e, 'code', None)) from e
        finally:
            release_client(client)

        if not response.session:
            raise IdentityProviderError("Failed to refresh session")
        return session_from_auth(response.session, response.user)


class SupabaseProfileStore(ProfileStore):
    """Profile rows in a PostgREST table"""

    def __init__(self, client: Client, table: str, owns_client: bool = False):
        self.client = client
        self.table = table
        self.owns_client = owns_client

    async def close(self):
        if self.owns_client:
            release_client(self.client)

    async def get(self, user_id: str) -> Optional[Profile]:
        query = self.client.table(self.table).select("*").eq("id", user_id).single()
        try:
            response = await _run(query.execute)
        except APIError as e:
            if e.code == NO_ROWS_CODE:
                return None
            raise ProfileStoreError(e.message or str(e), e.code) from e

        if not response.data:
            return None
        return Profile.from_row(response.data)

    async def insert_if_absent(self, profile: Profile) -> Profile:
        query = self.client.table(self.table).upsert(
            profile.to_dict(),
            on_conflict="id",
            ignore_duplicates=True
        )
        try:
            response = await _run(query.execute)
        except APIError as e:
            raise ProfileStoreError(e.message or str(e), e.code) from e

        if response.data:
            logger.info(f"Profile created for user {profile.id}")
            return Profile.from_row(response.data[0])

        # Duplicate ignored: another request created the row first
        existing = await self.get(profile.id)
        if existing is None:
            raise ProfileStoreError(f"Profile {profile.id} was neither inserted nor found")
        return existing


class SupabaseClient(IdentityPlatform):
    """Supabase client wrapper for authentication and profile services"""

    def __init__(self, settings: Settings):
        self.url: str = settings.supabase_url
        self.key: str = settings.supabase_anon_key
        self.profiles_table: str = settings.profiles_table
        self.client: Optional[Client] = None
        self._identity = SupabaseIdentityProvider(self)

        if self.url and self.key:
            try:
                self.client = create_client(self.url, self.key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize Supabase client: {e}")
                self.client = None
        else:
            logger.warning("Supabase credentials not found in environment")

    def is_available(self) -> bool:
        """Check if Supabase is available and configured"""
        return self.client is not None

    def get_client(self) -> Client:
        """Get the shared anon client"""
        if not self.client:
            raise ProviderUnavailable("Supabase client not available")
        return self.client

    def new_client(self, access_token: Optional[str] = None) -> Client:
        """Create a fresh client, authorized as the user when a token is given"""
        if not self.is_available():
            raise ProviderUnavailable("Supabase client not available")

        options = ClientOptions(persist_session=False, auto_refresh_token=False)
        if access_token:
            options = ClientOptions(
                headers={"Authorization": f"Bearer {access_token}"},
                persist_session=False,
                auto_refresh_token=False
            )
        return create_client(self.url, self.key, options=options)

    @property
    def identity(self) -> IdentityProvider:
        return self._identity

    def profiles(self, access_token: Optional[str] = None) -> ProfileStore:
        if access_token:
            return SupabaseProfileStore(self.new_client(access_token), self.profiles_table, owns_client=True)
        return SupabaseProfileStore(self.get_client(), self.profiles_table)

    async def fetch_sample(self, table: str, limit: int = 1) -> List[Dict[str, Any]]:
        query = self.get_client().table(table).select("*").limit(limit)
        response = await _run(query.execute)
        return response.data or []
