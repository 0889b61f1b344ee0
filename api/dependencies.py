"""
FastAPI dependencies (shared across routes).

Collaborators (mailer, summarizer) are created once by ``main.create_app``
and kept on ``app.state``; services are built per request around the
request's DB session.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.service import AccountService
from database.session import get_db_session
from notes.service import NotesService
from notes.summary import SummaryService
from utils.email_service import EmailService


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


def get_mailer(request: Request) -> EmailService:
    return request.app.state.mailer


def get_summary_service(request: Request) -> SummaryService:
    return request.app.state.summarizer


def get_account_service(
    session: AsyncSession = Depends(db_session),
    mailer: EmailService = Depends(get_mailer),
) -> AccountService:
    return AccountService(session, mailer)


def get_notes_service(session: AsyncSession = Depends(db_session)) -> NotesService:
    return NotesService(session)
