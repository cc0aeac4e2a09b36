"""
Pytest fixtures for EduVerse backend tests
"""

import uuid
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from eduverse.config import Settings
from eduverse.main import create_app
from eduverse.models.user import Identity, Profile, Session, SignUpResult
from eduverse.services.providers import (
    IdentityPlatform, IdentityProvider, IdentityProviderError, ProfileStore, ProfileStoreError
)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test."
    )


class InMemoryIdentityProvider(IdentityProvider):
    """Identity provider keeping users and tokens in dictionaries"""

    def __init__(self, auto_confirm: bool = True, min_password_length: Optional[int] = None):
        self.auto_confirm = auto_confirm
        self.min_password_length = min_password_length
        self.users: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.get_user_calls = 0

    def _issue(self, user_id: str) -> Session:
        access_token = f"access-{uuid.uuid4().hex}"
        refresh_token = f"refresh-{uuid.uuid4().hex}"
        self.tokens[access_token] = user_id
        self.refresh_tokens[refresh_token] = user_id
        return Session(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=3600,
            identity=self.identity_of(user_id)
        )

    def identity_of(self, user_id: str) -> Identity:
        user = self.users[user_id]
        return Identity(id=user_id, email=user['email'], metadata=dict(user['metadata']))

    def add_user(self, email: str, password: str = "secret", **metadata) -> Session:
        """Create a user directly and return a session for it"""
        user_id = str(uuid.uuid4())
        self.users[user_id] = {'email': email, 'password': password, 'metadata': metadata}
        return self._issue(user_id)

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> SignUpResult:
        if any(user['email'] == email for user in self.users.values()):
            raise IdentityProviderError("User already registered", "user_already_exists")
        if self.min_password_length and len(password) < self.min_password_length:
            raise IdentityProviderError("Password should be at least 6 characters.", "weak_password")

        user_id = str(uuid.uuid4())
        self.users[user_id] = {'email': email, 'password': password, 'metadata': dict(metadata)}
        session = self._issue(user_id) if self.auto_confirm else None
        return SignUpResult(identity=self.identity_of(user_id), session=session)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        for user_id, user in self.users.items():
            if user['email'] == email and user['password'] == password:
                return self._issue(user_id)
        raise IdentityProviderError("Invalid login credentials", "invalid_credentials")

    async def get_user(self, access_token: str) -> Identity:
        self.get_user_calls += 1
        user_id = self.tokens.get(access_token)
        if user_id is None:
            raise IdentityProviderError("invalid JWT: unable to parse or verify signature", "bad_jwt")
        return self.identity_of(user_id)

    async def refresh_session(self, refresh_token: str) -> Session:
        user_id = self.refresh_tokens.pop(refresh_token, None)
        if user_id is None:
            raise IdentityProviderError("Invalid Refresh Token: Refresh Token Not Found", "refresh_token_not_found")
        return self._issue(user_id)


class InMemoryProfileStore(ProfileStore):
    """Profile store view bound to one access token"""

    def __init__(self, platform: "InMemoryPlatform", access_token: Optional[str]):
        self.platform = platform
        self.access_token = access_token

    async def get(self, user_id: str) -> Optional[Profile]:
        if self.platform.fail_get:
            raise ProfileStoreError(self.platform.fail_get, "42501")
        row = self.platform.rows.get(user_id)
        return Profile.from_row(row) if row else None

    async def insert_if_absent(self, profile: Profile) -> Profile:
        self.platform.insert_calls.append((profile, self.access_token))
        if self.platform.fail_insert:
            raise ProfileStoreError(self.platform.fail_insert, "42501")
        self.platform.rows.setdefault(profile.id, profile.to_dict())
        return Profile.from_row(self.platform.rows[profile.id])

    async def close(self):
        self.platform.closed_stores += 1


class InMemoryPlatform(IdentityPlatform):
    """Identity platform fake used by service and route tests"""

    def __init__(self, auto_confirm: bool = True, min_password_length: Optional[int] = None):
        self._identity = InMemoryIdentityProvider(
            auto_confirm=auto_confirm,
            min_password_length=min_password_length
        )
        self.closed_stores = 0
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.insert_calls: List[Any] = []
        self.fail_get: Optional[str] = None
        self.fail_insert: Optional[str] = None
        self.sample_error: Optional[Exception] = None

    @property
    def identity(self) -> InMemoryIdentityProvider:
        return self._identity

    def profiles(self, access_token: Optional[str] = None) -> ProfileStore:
        return InMemoryProfileStore(self, access_token)

    async def fetch_sample(self, table: str, limit: int = 1) -> List[Dict[str, Any]]:
        if self.sample_error:
            raise self.sample_error
        return [{'table': table}][:limit]


@pytest.fixture
def platform() -> InMemoryPlatform:
    return InMemoryPlatform()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="",
        supabase_anon_key="",
        port=5000,
        _env_file=None
    )


@pytest.fixture
def client(settings, platform) -> TestClient:
    app = create_app(settings=settings, platform=platform)
    return TestClient(app)


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
