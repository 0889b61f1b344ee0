"""
Request / response schemas for the notes endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from database.models import Note


class NoteCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    color: Optional[str] = None
    date: Optional[datetime] = None


class NoteUpdate(BaseModel):
    """Partial update; only the fields present in the request are applied."""

    title: Optional[str] = None
    content: Optional[str] = None
    color: Optional[str] = None
    date: Optional[datetime] = None


class SummaryRequest(BaseModel):
    content: Optional[str] = None


class NoteOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    content: str
    color: str
    date: datetime
    user: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_note(cls, note: Note) -> "NoteOut":
        return cls(
            id=str(note.note_id),
            title=note.title or "",
            content=note.content,
            color=note.color,
            date=note.date,
            user=str(note.user_id),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
