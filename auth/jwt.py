"""
JWT-style session token creation and verification.

Tokens are base64-encoded JSON payloads signed with HMAC-SHA256.
Secret key is loaded from ``config.jwt_secret`` (env var: ``JWT_SECRET``).

Payload: ``{"user_id": ..., "iat": <issued-at>, "exp": <expiry>}``.  Tokens
are stateless; there is no revocation list.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Dict, Optional

from config.settings import config
from core.errors import ExpiredTokenError, InvalidTokenError


def _sign(raw: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), raw, hashlib.sha256).hexdigest()


def create_token(
    user_id: str,
    *,
    expires_in: Optional[int] = None,
    now: Optional[float] = None,
) -> str:
    """Create a signed token containing ``user_id``, issue time and expiry."""
    issued_at = int(now if now is not None else time.time())
    lifetime = config.jwt_expiry_seconds if expires_in is None else expires_in
    payload = {
        "user_id": str(user_id),
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    raw = json.dumps(payload, separators=(",", ":")).encode()
    return urlsafe_b64encode(raw).decode() + "." + _sign(raw, config.jwt_secret)


def decode_token(token: str, *, now: Optional[float] = None) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the payload.

    Raises ``InvalidTokenError`` for malformed tokens or a signature
    mismatch, ``ExpiredTokenError`` once ``exp`` has passed.
    """
    parts = token.split(".", 1) if token else []
    if len(parts) != 2:
        raise InvalidTokenError()

    try:
        raw = urlsafe_b64decode(parts[0].encode())
    except (binascii.Error, ValueError):
        raise InvalidTokenError()

    try:
        signature_ok = hmac.compare_digest(parts[1], _sign(raw, config.jwt_secret))
    except TypeError:  # non-ASCII signature
        signature_ok = False
    if not signature_ok:
        raise InvalidTokenError()

    try:
        payload = json.loads(raw)
    except ValueError:
        raise InvalidTokenError()
    if not isinstance(payload, dict) or not payload.get("user_id"):
        raise InvalidTokenError()

    current = now if now is not None else time.time()
    try:
        expires = float(payload["exp"])
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenError()
    if expires <= current:
        raise ExpiredTokenError()

    return payload


def verify_token(token: str) -> str:
    """Verify token and return ``user_id``."""
    return decode_token(token)["user_id"]
