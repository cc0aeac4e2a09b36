from .user import SignupRequest, LoginRequest, RefreshRequest

__all__ = [
    "SignupRequest",
    "LoginRequest",
    "RefreshRequest",
]
