"""Pydantic request/response schemas for fv_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.fv_common.datetime_utils import to_iso
from src.fv_common.schemas import CamelModel
from src.fv_gateway.user.db_models import UserModel


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Enforce: at least one uppercase, one lowercase, one digit."""
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    refresh_token: str


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, user: UserModel) -> "UserResponse":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            created_at=to_iso(user.created_at) or "",
            updated_at=to_iso(user.updated_at) or "",
        )


class AuthResponse(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds


class RefreshResponse(CamelModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
