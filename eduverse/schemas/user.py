"""
User request schemas

Pydantic models validating auth request bodies at the API boundary.
"""

from pydantic import BaseModel, Field, field_validator

from eduverse.models.user import Role


class SignupRequest(BaseModel):
    """Schema for registering a new user"""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: Role

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip()


class LoginRequest(BaseModel):
    """Schema for password login"""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip()


class RefreshRequest(BaseModel):
    """Schema for exchanging a refresh token"""
    refresh_token: str = Field(..., min_length=1)
