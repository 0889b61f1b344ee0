"""
HTTP tests for /api/notes.
"""

import uuid

import pytest


async def _create(client, headers, **fields):
    payload = {"title": "Groceries", "content": "milk, eggs"}
    payload.update(fields)
    return await client.post("/api/notes", json=payload, headers=headers)


class TestCreateAndList:
    @pytest.mark.asyncio
    async def test_created_note_is_listed_for_owner_only(self, client, signup, auth_header):
        ann_id, ann = await signup()
        _, bob = await signup(name="Bob", email="bob@example.com")

        resp = await _create(client, auth_header(ann))
        assert resp.status_code == 201
        note = resp.json()["note"]
        assert note["title"] == "Groceries"
        assert note["content"] == "milk, eggs"
        assert note["color"] == "#10b981"
        assert note["user"] == ann_id
        assert {"id", "date", "createdAt", "updatedAt"} <= note.keys()

        ann_notes = (await client.get("/api/notes", headers=auth_header(ann))).json()["notes"]
        bob_notes = (await client.get("/api/notes", headers=auth_header(bob))).json()["notes"]
        assert [n["id"] for n in ann_notes] == [note["id"]]
        assert bob_notes == []

    @pytest.mark.asyncio
    async def test_defaults_and_trimming(self, client, signup, auth_header):
        _, token = await signup()
        resp = await client.post(
            "/api/notes", json={"content": "  just content  "}, headers=auth_header(token)
        )
        note = resp.json()["note"]
        assert resp.status_code == 201
        assert note["title"] == ""
        assert note["content"] == "just content"

    @pytest.mark.asyncio
    async def test_explicit_color_and_date(self, client, signup, auth_header):
        _, token = await signup()
        resp = await _create(
            client, auth_header(token), color="#FF0000", date="2026-03-01T10:00:00Z"
        )
        note = resp.json()["note"]
        assert note["color"] == "#FF0000"
        assert note["date"].startswith("2026-03-01T10:00:00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields, message",
        [
            ({"content": ""}, "Content is required"),
            ({"content": None}, "Content is required"),
            ({"color": "green"}, "Please provide a valid hex color"),
            ({"title": "x" * 101}, "Title cannot be more than 100 characters"),
        ],
    )
    async def test_validation(self, client, signup, auth_header, fields, message):
        _, token = await signup()
        resp = await _create(client, auth_header(token), **fields)
        assert resp.status_code == 400
        assert resp.json()["error"] == message

    @pytest.mark.asyncio
    async def test_malformed_date(self, client, signup, auth_header):
        _, token = await signup()
        resp = await _create(client, auth_header(token), date="next tuesday")
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request body"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        assert (await client.get("/api/notes")).status_code == 401
        assert (await client.post("/api/notes", json={"content": "x"})).status_code == 401


class TestUpdate:
    @pytest.mark.asyncio
    async def test_partial_update_touches_only_sent_fields(self, client, signup, auth_header):
        _, token = await signup()
        note = (await _create(client, auth_header(token), color="#123456")).json()["note"]

        resp = await client.put(
            f"/api/notes/{note['id']}", json={"content": "bread"}, headers=auth_header(token)
        )
        assert resp.status_code == 200
        updated = resp.json()["note"]
        assert updated["content"] == "bread"
        assert updated["title"] == "Groceries"
        assert updated["color"] == "#123456"

    @pytest.mark.asyncio
    async def test_other_users_note_is_not_found(self, client, signup, auth_header):
        _, ann = await signup()
        _, bob = await signup(name="Bob", email="bob@example.com")
        note = (await _create(client, auth_header(ann))).json()["note"]

        resp = await client.put(
            f"/api/notes/{note['id']}", json={"content": "hijacked"}, headers=auth_header(bob)
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Note not found"}

        ann_notes = (await client.get("/api/notes", headers=auth_header(ann))).json()["notes"]
        assert ann_notes[0]["content"] == "milk, eggs"

    @pytest.mark.asyncio
    async def test_unknown_and_malformed_ids(self, client, signup, auth_header):
        _, token = await signup()
        missing = await client.put(
            f"/api/notes/{uuid.uuid4()}", json={"title": "x"}, headers=auth_header(token)
        )
        malformed = await client.put(
            "/api/notes/not-a-uuid", json={"title": "x"}, headers=auth_header(token)
        )
        assert missing.status_code == 404
        assert malformed.status_code == 400

    @pytest.mark.asyncio
    async def test_blank_content_rejected(self, client, signup, auth_header):
        _, token = await signup()
        note = (await _create(client, auth_header(token))).json()["note"]
        resp = await client.put(
            f"/api/notes/{note['id']}", json={"content": "   "}, headers=auth_header(token)
        )
        assert resp.status_code == 400


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_own_note(self, client, signup, auth_header):
        _, token = await signup()
        note = (await _create(client, auth_header(token))).json()["note"]

        resp = await client.delete(f"/api/notes/{note['id']}", headers=auth_header(token))
        assert resp.status_code == 200
        assert resp.json() == {"message": "Note deleted successfully"}
        assert (await client.get("/api/notes", headers=auth_header(token))).json()["notes"] == []

    @pytest.mark.asyncio
    async def test_other_users_note_is_not_found(self, client, signup, auth_header):
        _, ann = await signup()
        _, bob = await signup(name="Bob", email="bob@example.com")
        note = (await _create(client, auth_header(ann))).json()["note"]

        resp = await client.delete(f"/api/notes/{note['id']}", headers=auth_header(bob))
        assert resp.status_code == 404
        assert len((await client.get("/api/notes", headers=auth_header(ann))).json()["notes"]) == 1


class TestSummary:
    @pytest.mark.asyncio
    async def test_summary_is_public(self, client, llm):
        resp = await client.post("/api/notes/summary", json={"content": "A long note."})
        assert resp.status_code == 200
        assert resp.json() == {"summary": "A short summary."}
        assert llm.prompts[0].endswith("A long note.")
        assert "about 60 words" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_missing_content(self, client):
        resp = await client.post("/api/notes/summary", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Content is required"}

    @pytest.mark.asyncio
    async def test_provider_failure(self, client, llm):
        llm.error = RuntimeError("rate limited")
        resp = await client.post("/api/notes/summary", json={"content": "text"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to generate summary", "details": "rate limited"}
