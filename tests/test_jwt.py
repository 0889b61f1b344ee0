"""
Tests for session token creation and verification.
"""

import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode

import pytest

from auth.jwt import create_token, decode_token, verify_token
from config.settings import config
from core.errors import AuthenticationError, ExpiredTokenError, InvalidTokenError


class TestCreateToken:
    def test_round_trip(self):
        token = create_token("user-123")
        assert verify_token(token) == "user-123"

    def test_payload_carries_issue_time_and_default_expiry(self):
        now = time.time()
        payload = decode_token(create_token("u1", now=now), now=now)
        assert payload["iat"] == int(now)
        assert payload["exp"] - payload["iat"] == config.jwt_expiry_seconds
        assert config.jwt_expiry_seconds == 7 * 24 * 3600

    def test_custom_lifetime(self):
        payload = decode_token(create_token("u1", expires_in=60))
        assert payload["exp"] - payload["iat"] == 60


class TestVerifyToken:
    def test_expired_token(self):
        token = create_token("u1", expires_in=-1)
        with pytest.raises(ExpiredTokenError) as exc_info:
            verify_token(token)
        assert exc_info.value.message == "Token expired"

    def test_expiry_is_checked_against_clock(self):
        issued = 1_000_000
        token = create_token("u1", expires_in=10, now=issued)
        assert decode_token(token, now=issued + 9)["user_id"] == "u1"
        with pytest.raises(ExpiredTokenError):
            decode_token(token, now=issued + 10)

    def test_tampered_payload_is_invalid_not_expired(self):
        token = create_token("u1", expires_in=-100)
        body, sig = token.split(".", 1)
        payload = json.loads(urlsafe_b64decode(body))
        payload["user_id"] = "someone-else"
        forged = urlsafe_b64encode(json.dumps(payload).encode()).decode() + "." + sig
        with pytest.raises(InvalidTokenError) as exc_info:
            verify_token(forged)
        assert exc_info.value.message == "Invalid token"

    def test_bad_signature(self):
        token = create_token("u1")
        with pytest.raises(InvalidTokenError):
            verify_token(token[:-4] + "0000")

    @pytest.mark.parametrize("garbage", ["", "abc", "abc.def", "!!!.???", "a.b.c"])
    def test_malformed(self, garbage):
        with pytest.raises(InvalidTokenError):
            verify_token(garbage)

    def test_both_failures_are_authentication_errors(self):
        assert issubclass(InvalidTokenError, AuthenticationError)
        assert issubclass(ExpiredTokenError, AuthenticationError)
        assert InvalidTokenError().status_code == ExpiredTokenError().status_code == 401
