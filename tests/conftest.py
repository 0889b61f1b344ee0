"""
Shared fixtures: in-memory SQLite store, fake mailer / LLM, HTTP client.

Required settings must be in the environment before ``config.settings``
is first imported, so they are set at the top of this module.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")

import re
from typing import List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.pool import StaticPool

from core.errors import EmailDeliveryError
from database.models import User
from database.session import Database
from notes.summary import SummaryService
from utils.email_service import EmailService
from utils.llm_providers import BaseLLMProvider

_TOKEN_RE = re.compile(r"token=([0-9a-f]{64})")


class FakeMailer(EmailService):
    """Records outgoing mail instead of talking to an SMTP server."""

    def __init__(self) -> None:
        super().__init__()
        self.outbox: List[Tuple[str, str, str]] = []
        self.failing = False

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.failing:
            raise EmailDeliveryError(details="SMTP connection refused")
        self.outbox.append((to, subject, html))

    def last_token(self, path: str) -> Optional[str]:
        """Token from the newest mailed link pointing at ``/path``."""
        for _, _, html in reversed(self.outbox):
            if f"/{path}?" in html:
                match = _TOKEN_RE.search(html)
                if match:
                    return match.group(1)
        return None


class FakeLLMProvider(BaseLLMProvider):
    def __init__(self, reply: str = "A short summary.") -> None:
        self.reply = reply
        self.prompts: List[str] = []
        self.error: Optional[Exception] = None

    async def generate(self, prompt, *, temperature=0.3, model=None, max_tokens=1024):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest_asyncio.fixture
async def database():
    db = Database(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def llm():
    return FakeLLMProvider()


@pytest.fixture
def app(database, mailer, llm):
    from main import create_app

    return create_app(database=database, mailer=mailer, summarizer=SummaryService(llm))


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fetch_user(database):
    """Load a user by email in a fresh session (no stale identity map)."""

    async def _fetch(email: str) -> Optional[User]:
        async with database.session() as s:
            result = await s.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    return _fetch


@pytest.fixture
def signup(client, mailer):
    """Register, verify and log in a user; returns ``(user_id, token)``."""

    async def _signup(name: str = "Ann", email: str = "ann@example.com", password: str = "password1"):
        resp = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        token = mailer.last_token("verify-email")
        resp = await client.get("/api/auth/verify-email", params={"token": token})
        assert resp.status_code == 200, resp.text
        resp = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return body["user"]["id"], body["token"]

    return _signup


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_header():
    return bearer
