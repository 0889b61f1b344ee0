"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic salting and a work
factor taken from ``config.bcrypt_rounds``.
"""

from __future__ import annotations

import bcrypt

from config.settings import config

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    cost = rounds or config.bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=cost)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False
