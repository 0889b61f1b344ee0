"""
Notes API routes — CRUD on the caller's notes plus AI summaries.

Route prefix: /api/notes
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from api.dependencies import get_notes_service, get_summary_service
from auth.dependencies import AuthContext, get_current_user
from core.errors import NotFoundError, ValidationError
from database.models import DEFAULT_NOTE_COLOR
from notes.schemas import NoteCreate, NoteOut, NoteUpdate, SummaryRequest
from notes.service import NotesService
from notes.summary import SummaryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notes"])

MAX_TITLE_LENGTH = 100
_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _clean_title(title: str | None) -> str:
    title = (title or "").strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title cannot be more than {MAX_TITLE_LENGTH} characters")
    return title


def _clean_color(color: str | None) -> str:
    if not color:
        return DEFAULT_NOTE_COLOR
    if not _HEX_COLOR_RE.match(color):
        raise ValidationError("Please provide a valid hex color")
    return color


def _parse_note_id(note_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(note_id)
    except ValueError:
        raise ValidationError("Invalid note ID")


def _validated_update(req: NoteUpdate) -> NoteUpdate:
    """Normalise the fields the client sent; leave absent fields unset."""
    fields: Dict[str, Any] = {}
    sent = req.model_fields_set
    if "title" in sent:
        fields["title"] = _clean_title(req.title)
    if "content" in sent:
        content = (req.content or "").strip()
        if not content:
            raise ValidationError("Content cannot be empty")
        fields["content"] = content
    if "color" in sent:
        fields["color"] = _clean_color(req.color)
    if "date" in sent and req.date is not None:
        fields["date"] = req.date
    return NoteUpdate(**fields)


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_note(
    req: NoteCreate,
    auth: AuthContext = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
) -> Dict[str, Any]:
    content = (req.content or "").strip()
    if not content:
        raise ValidationError("Content is required")

    note = await notes.create_note(
        auth.user_id,
        title=_clean_title(req.title),
        content=content,
        color=_clean_color(req.color),
        date=req.date,
    )
    return {
        "message": "Note created successfully",
        "note": NoteOut.from_note(note).model_dump(by_alias=True, mode="json"),
    }


@router.get("")
async def get_notes(
    auth: AuthContext = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
) -> Dict[str, Any]:
    items = await notes.get_notes(auth.user_id)
    return {
        "notes": [NoteOut.from_note(n).model_dump(by_alias=True, mode="json") for n in items],
    }


@router.put("/{note_id}")
async def update_note(
    note_id: str,
    req: NoteUpdate,
    auth: AuthContext = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
) -> Dict[str, Any]:
    nid = _parse_note_id(note_id)
    update = _validated_update(req)

    # Other users' notes read as missing.
    note = await notes.get_owned_note(nid, auth.user_id)
    if note is None:
        raise NotFoundError("Note not found")

    note = await notes.update_note(note, update)
    return {
        "message": "Note updated successfully",
        "note": NoteOut.from_note(note).model_dump(by_alias=True, mode="json"),
    }


@router.delete("/{note_id}")
async def delete_note(
    note_id: str,
    auth: AuthContext = Depends(get_current_user),
    notes: NotesService = Depends(get_notes_service),
) -> Dict[str, Any]:
    nid = _parse_note_id(note_id)

    note = await notes.get_owned_note(nid, auth.user_id)
    if note is None:
        raise NotFoundError("Note not found")

    await notes.delete_note(note)
    return {"message": "Note deleted successfully"}


@router.post("/summary")
async def generate_summary(
    req: SummaryRequest,
    summarizer: SummaryService = Depends(get_summary_service),
) -> Dict[str, Any]:
    if not req.content or not req.content.strip():
        raise ValidationError("Content is required")

    summary = await summarizer.summarize(req.content)
    return {"summary": summary}
