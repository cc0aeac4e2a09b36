"""
User Models
Identity, session and profile definitions shared by the gates and the auth flow
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    """User role enumeration"""
    STUDENT = "student"
    EDUCATOR = "educator"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Return the matching role, or None for unknown values"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class Identity:
    """User record owned by the identity provider"""
    id: str
    email: Optional[str]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.metadata.get('name')

    @property
    def role(self) -> Optional[Role]:
        return Role.parse(self.metadata.get('role'))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'email': self.email,
            'user_metadata': dict(self.metadata)
        }

    def summary(self) -> Dict[str, Any]:
        """Flat view used by protected routes"""
        role = self.role
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': role.value if role else None
        }


@dataclass
class Session:
    """Authenticated session issued by the identity provider"""
    access_token: str
    identity: Identity
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'token_type': self.token_type,
            'expires_in': self.expires_in,
            'expires_at': self.expires_at,
            'user': self.identity.to_dict()
        }


@dataclass
class SignUpResult:
    """Sign up outcome; session is None when email confirmation is pending"""
    identity: Identity
    session: Optional[Session] = None


@dataclass
class Profile:
    """Profile row keyed by the identity id"""
    id: str
    name: Optional[str]
    role: Role

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Profile":
        """Build a profile from a store row"""
        return cls(
            id=str(row['id']),
            name=row.get('name'),
            role=Role.parse(row.get('role')) or Role.STUDENT
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'role': self.role.value
        }
