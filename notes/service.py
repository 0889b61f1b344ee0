"""
Notes persistence — create, list, update and delete notes owned by a user.

Store failures surface as ``DependencyError`` with the driver message in
``details``; ownership is enforced by ``get_owned_note``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import DependencyError
from database.models import DEFAULT_NOTE_COLOR, Note
from notes.schemas import NoteUpdate

logger = logging.getLogger(__name__)


def _uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


class NotesService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _fail(self, action: str, exc: SQLAlchemyError) -> DependencyError:
        await self.session.rollback()
        logger.error("Error trying to %s: %s", action, exc)
        return DependencyError(f"Failed to {action}", details=str(exc))

    async def create_note(
        self,
        user_id: str,
        *,
        content: str,
        title: str = "",
        color: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Note:
        note = Note(
            note_id=uuid.uuid4(),
            user_id=_uuid(user_id),
            title=title,
            content=content,
            color=color or DEFAULT_NOTE_COLOR,
            date=date or datetime.now(timezone.utc),
        )
        self.session.add(note)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("create note", exc) from exc

        logger.info("Created note %s for user %s", note.note_id, user_id)
        return note

    async def get_notes(self, user_id: str) -> List[Note]:
        """All notes of ``user_id``, newest first."""
        try:
            result = await self.session.execute(
                select(Note)
                .where(Note.user_id == _uuid(user_id))
                .order_by(Note.created_at.desc())
            )
        except SQLAlchemyError as exc:
            raise await self._fail("fetch notes", exc) from exc
        return list(result.scalars().all())

    async def get_owned_note(self, note_id: str | uuid.UUID, user_id: str) -> Optional[Note]:
        """Return the note only if it exists *and* belongs to ``user_id``."""
        try:
            result = await self.session.execute(
                select(Note).where(
                    Note.note_id == _uuid(note_id),
                    Note.user_id == _uuid(user_id),
                )
            )
        except SQLAlchemyError as exc:
            raise await self._fail("fetch note", exc) from exc
        return result.scalar_one_or_none()

    async def update_note(self, note: Note, update: NoteUpdate) -> Note:
        """Apply the fields explicitly set on ``update``; others stay as they are."""
        changes = update.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(note, field, value)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("update note", exc) from exc

        logger.info("Updated note %s (%s)", note.note_id, ", ".join(sorted(changes)) or "no fields")
        return note

    async def delete_note(self, note: Note) -> None:
        note_id = note.note_id
        try:
            await self.session.delete(note)
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("delete note", exc) from exc

        logger.info("Deleted note %s", note_id)
