"""
Gateway Errors
Exception taxonomy mapped onto HTTP status codes by the application
"""

from fastapi import status


class GatewayError(Exception):
    """Base error reported to the caller as {success: false, error: message}"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingToken(GatewayError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Missing token"):
        super().__init__(message)


class InvalidToken(GatewayError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class Forbidden(GatewayError):
    status_code = status.HTTP_403_FORBIDDEN

    @classmethod
    def for_roles(cls, roles) -> "Forbidden":
        """Build the access denied error listing the allowed roles"""
        names = " or ".join(getattr(role, 'value', role) for role in roles)
        return cls(f"Access denied: requires {names} role")


class SignupFailed(GatewayError):
    pass


class LoginFailed(GatewayError):
    pass


class ProfileFetchFailed(GatewayError):
    pass


class ValidationFailed(GatewayError):
    pass


class RefreshFailed(GatewayError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ProviderUnavailable(GatewayError):
    pass
