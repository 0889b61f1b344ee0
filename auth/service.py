"""
Account service — registration, login, email verification and password
reset.

The service authenticates; deciding whether an authenticated but
unverified account may use the app is left to the controller.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import create_token
from auth.one_time import generate_one_time_token, reset_token_expiry
from auth.password import hash_password, verify_password
from core.errors import (
    DependencyError,
    DuplicateEmailError,
    EmailDeliveryError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidVerificationTokenError,
    UnknownEmailError,
)
from database.models import User
from utils.email_service import EmailService

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


class AccountService:
    def __init__(self, session: AsyncSession, mailer: EmailService) -> None:
        self.session = session
        self.mailer = mailer

    # ── Lookups ────────────────────────────────────────────────────────

    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_user(self, user_id: str | uuid.UUID) -> Optional[User]:
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        return await self.session.get(User, uid)

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise DependencyError(f"Failed to {action}", details=str(exc)) from exc

    # ── Registration ───────────────────────────────────────────────────

    async def register(self, name: str, email: str, password: str) -> User:
        """Create an unverified account and send the verification email."""
        email = normalize_email(email)
        if await self._find_by_email(email) is not None:
            raise DuplicateEmailError()

        user = User(
            user_id=uuid.uuid4(),
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            is_email_verified=False,
            email_verification_token=generate_one_time_token(),
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent registration for the same email.
            await self.session.rollback()
            raise DuplicateEmailError() from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise DependencyError("Registration failed", details=str(exc)) from exc

        logger.info("Registered user %s (%s)", user.name, user.user_id)

        try:
            await self.mailer.send_verification_email(user.email, user.email_verification_token)
        except EmailDeliveryError:
            logger.warning(
                "Verification email for %s not delivered; account kept", user.user_id
            )

        return user

    # ── Login ──────────────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """Return the user and a fresh session token."""
        user = await self._find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        token = create_token(str(user.user_id))
        logger.info("Login: %s (%s)", user.name, user.user_id)
        return user, token

    # ── Email verification ─────────────────────────────────────────────

    async def verify_email(self, token: str) -> User:
        result = await self.session.execute(
            select(User).where(User.email_verification_token == token)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise InvalidVerificationTokenError()

        user.is_email_verified = True
        user.email_verification_token = None
        await self._commit("verify email")
        logger.info("Email verified for %s", user.user_id)

        await self.mailer.send_welcome_email(user.email, user.name)
        return user

    # ── Password reset ─────────────────────────────────────────────────

    async def forgot_password(self, email: str) -> None:
        """Issue a reset token (replacing any earlier one) and email it."""
        user = await self._find_by_email(email)
        if user is None:
            raise UnknownEmailError()

        user.password_reset_token = generate_one_time_token()
        user.password_reset_expires = reset_token_expiry()
        await self._commit("request password reset")

        # Delivery failure propagates to the caller.
        await self.mailer.send_password_reset_email(user.email, user.password_reset_token)
        logger.info("Password reset requested for %s", user.user_id)

    async def reset_password(self, token: str, new_password: str) -> None:
        now = datetime.now(timezone.utc)
        result = await self.session.execute(
            select(User).where(
                User.password_reset_token == token,
                User.password_reset_expires > now,
            )
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise InvalidOrExpiredTokenError()

        user.password_hash = hash_password(new_password)
        user.password_reset_token = None
        user.password_reset_expires = None
        await self._commit("reset password")
        logger.info("Password reset for %s", user.user_id)

    # ── Profile ────────────────────────────────────────────────────────

    async def update_user(
        self, user_id: str | uuid.UUID, *, name: Optional[str] = None
    ) -> Optional[User]:
        user = await self.get_user(user_id)
        if user is None:
            return None
        if name is not None:
            user.name = name.strip()
        await self._commit("update user")
        return user
