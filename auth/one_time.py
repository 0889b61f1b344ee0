"""
One-time tokens for email verification and password reset.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from config.settings import config


def generate_one_time_token() -> str:
    """64 hex chars from 32 cryptographically random bytes."""
    return secrets.token_hex(32)


def reset_token_expiry(now: Optional[datetime] = None) -> datetime:
    """Point in time after which a freshly issued reset token is dead."""
    now = now or datetime.now(timezone.utc)
    return now + timedelta(seconds=config.password_reset_expiry_seconds)
