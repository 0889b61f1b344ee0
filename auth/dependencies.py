"""
Auth Gate — FastAPI dependency for authenticated routes.

Turns ``Authorization: Bearer <token>`` into an ``AuthContext``:

1. no bearer token             → 401 "Access token required"
2. token invalid / expired     → 401 "Invalid token" / "Token expired"
3. user deleted since issuance → 401 "User not found"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_account_service
from auth.jwt import verify_token
from auth.service import AccountService
from core.errors import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved by the gate; passed explicitly to controllers."""

    user_id: str


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    accounts: AccountService = Depends(get_account_service),
) -> AuthContext:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    user_id = verify_token(credentials.credentials)

    if await accounts.get_user(user_id) is None:
        logger.info("Rejected token for missing user %s", user_id)
        raise AuthenticationError("User not found")

    return AuthContext(user_id=user_id)
