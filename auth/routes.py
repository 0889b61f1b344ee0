"""
Auth API routes — register, login, email verification, password reset,
profile.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_account_service
from auth.dependencies import AuthContext, get_current_user
from auth.password import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH
from auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    UpdateProfileRequest,
    UserOut,
)
from auth.service import AccountService
from core.errors import EmailDeliveryError, NotFoundError, ValidationError
from database.models import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SHORT_PASSWORD = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
_LONG_PASSWORD = f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes"


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(_SHORT_PASSWORD)
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(_LONG_PASSWORD)


def _check_name(name: str) -> None:
    if len(name.strip()) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name cannot be more than {MAX_NAME_LENGTH} characters")


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    """Register a new (unverified) user."""
    if _blank(req.name) or _blank(req.email) or not req.password:
        raise ValidationError("Name, email, and password are required")
    _check_password(req.password)
    _check_name(req.name)
    email = req.email.strip()
    if len(email) > MAX_EMAIL_LENGTH or not _EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email address")

    user = await accounts.register(req.name, req.email, req.password)
    return {
        "message": "User created successfully. Please check your email to verify your account.",
        "user": UserOut.from_user(user),
    }


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    """Login with email + password.  Unverified accounts are turned away."""
    if _blank(req.email) or not req.password:
        raise ValidationError("Email and password are required")

    user, token = await accounts.login(req.email, req.password)

    if not user.is_email_verified:
        raise ValidationError(
            "Email verification pending. Please check your inbox to verify your account."
        )

    return {
        "message": "Login successful",
        "user": UserOut.from_user(user),
        "token": token,
    }


@router.get("/verify-email", response_model=MessageResponse)
async def verify_email(
    token: Optional[str] = Query(None),
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    if _blank(token):
        raise ValidationError("Verification token is required")

    await accounts.verify_email(token)
    return {"message": "Email verified successfully! Welcome to AI Notes!"}


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    req: ForgotPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    if _blank(req.email):
        raise ValidationError("Email is required")

    try:
        await accounts.forgot_password(req.email)
    except EmailDeliveryError as exc:
        # Surfaced as 400.
        raise ValidationError(exc.message) from exc

    return {"message": "Password reset email sent. Please check your inbox."}


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    req: ResetPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    if _blank(req.token) or not req.password:
        raise ValidationError("Token and password are required")
    _check_password(req.password)

    await accounts.reset_password(req.token, req.password)
    return {
        "message": "Password reset successfully. You can now login with your new password."
    }


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    auth: AuthContext = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    user = await accounts.get_user(auth.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return {"user": UserOut.from_user(user)}


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    req: UpdateProfileRequest,
    auth: AuthContext = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    if _blank(req.name):
        raise ValidationError("Name is required")
    _check_name(req.name)

    user = await accounts.update_user(auth.user_id, name=req.name)
    if user is None:
        raise NotFoundError("User not found")
    return {"user": UserOut.from_user(user)}
