"""
Request / response schemas for the auth endpoints.

Request fields are optional so the controller can answer missing input
with 400 and a readable message instead of a bare validation dump.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from database.models import User


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    password: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    is_email_verified: bool

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(
            id=str(user.user_id),
            name=user.name,
            email=user.email,
            is_email_verified=bool(user.is_email_verified),
        )


class MessageResponse(BaseModel):
    message: str


class RegisterResponse(BaseModel):
    message: str
    user: UserOut


class LoginResponse(BaseModel):
    message: str
    user: UserOut
    token: str


class ProfileResponse(BaseModel):
    user: UserOut
