from .user import Role, Identity, Session, Profile, SignUpResult

__all__ = [
    "Role",
    "Identity",
    "Session",
    "Profile",
    "SignUpResult",
]
