"""
Platform Capabilities
Abstract identity provider and profile store used by the auth flow
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from eduverse.models.user import Identity, Profile, Session, SignUpResult


class ProviderError(Exception):
    """Failure reported by the managed platform"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class IdentityProviderError(ProviderError):
    pass


class ProfileStoreError(ProviderError):
    pass


class IdentityProvider(ABC):
    """Verifies tokens, issues sessions and holds per-user metadata"""

    @abstractmethod
    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> SignUpResult:
        ...

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> Session:
        ...

    @abstractmethod
    async def get_user(self, access_token: str) -> Identity:
        ...

    @abstractmethod
    async def refresh_session(self, refresh_token: str) -> Session:
        ...


class ProfileStore(ABC):
    """Profile rows keyed by identity id"""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[Profile]:
        """Return the profile, or None when no row exists"""

    @abstractmethod
    async def insert_if_absent(self, profile: Profile) -> Profile:
        """Insert the profile unless a row with its id exists; return the stored row"""

    async def close(self):
        """Release connections held for this store"""

    async def __aenter__(self) -> "ProfileStore":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


class IdentityPlatform(ABC):
    """Managed backend bundling identity and profile storage"""

    @property
    @abstractmethod
    def identity(self) -> IdentityProvider:
        ...

    @abstractmethod
    def profiles(self, access_token: Optional[str] = None) -> ProfileStore:
        """Profile store authorized with the given access token"""

    @abstractmethod
    async def fetch_sample(self, table: str, limit: int = 1) -> List[Dict[str, Any]]:
        """Read a few rows to prove connectivity"""
