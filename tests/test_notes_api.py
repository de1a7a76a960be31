import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notekeeper.api.deps import get_note_cache
from notekeeper.core.db import get_db
from notekeeper.core.security import create_access_token
from notekeeper.main import app


def _auth(user_id: int, role: str = "user") -> dict:
    token = create_access_token({"sub": str(user_id), "role": role})
    return {"Authorization": f"Bearer {token}"}


ALICE = _auth(1)
BOB = _auth(2)
ADMIN = _auth(4, "admin")


@pytest_asyncio.fixture
async def client(session_factory, users, cache):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_note_cache] = lambda: cache
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create_note(client, headers=ALICE, title="T1", content="C1") -> dict:
    response = await client.post("/notes", json={"title": title, "content": content}, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_requests_without_token_are_rejected(client):
    response = await client.get("/notes")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/notes", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_returns_camel_case_note(client):
    note = await _create_note(client)

    assert note["title"] == "T1"
    assert note["owner"]["id"] == 1
    assert note["owner"]["username"] == "alice"
    assert note["sharedWith"] == []
    assert "createdAt" in note and "updatedAt" in note


@pytest.mark.asyncio
async def test_blank_title_is_validation_error(client):
    response = await client.post("/notes", json={"title": "   ", "content": "x"}, headers=ALICE)
    assert response.status_code == 422
    assert response.json()["message"] == "Validation error"


@pytest.mark.asyncio
async def test_read_share_update_delete_flow(client):
    note = await _create_note(client)
    note_url = f"/notes/{note['id']}"

    response = await client.get(note_url, headers=BOB)
    assert response.status_code == 403

    response = await client.post(f"{note_url}/share", json={"userId": 2}, headers=ALICE)
    assert response.status_code == 200
    assert [user["id"] for user in response.json()["sharedWith"]] == [2]

    response = await client.get(note_url, headers=BOB)
    assert response.status_code == 200

    response = await client.put(note_url, json={"title": "T2", "content": "C2"}, headers=BOB)
    assert response.status_code == 403

    response = await client.put(note_url, json={"title": "T2", "content": "C2"}, headers=ALICE)
    assert response.status_code == 200
    assert response.json()["title"] == "T2"

    response = await client.get("/notes/shared", headers=BOB)
    assert response.status_code == 200
    assert [(n["title"], n["content"]) for n in response.json()] == [("T2", "C2")]

    response = await client.delete(note_url, headers=BOB)
    assert response.status_code == 403

    response = await client.delete(note_url, headers=ALICE)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await client.get(note_url, headers=ALICE)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_missing_note_is_404(client):
    response = await client.get("/notes/999", headers=ALICE)
    assert response.status_code == 404
    assert response.json() == {"message": "Note not found"}


@pytest.mark.asyncio
async def test_share_with_unknown_user_is_404(client):
    note = await _create_note(client)

    response = await client.post(f"/notes/{note['id']}/share", json={"userId": 77}, headers=ALICE)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_sees_every_note(client):
    await _create_note(client, headers=ALICE, title="alice")
    await _create_note(client, headers=BOB, title="bob")

    response = await client.get("/notes", headers=ADMIN)
    assert response.status_code == 200
    assert {n["title"] for n in response.json()} == {"alice", "bob"}

    response = await client.get("/notes", headers=BOB)
    assert [n["title"] for n in response.json()] == ["bob"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

    response = await client.get("/health/db")
    assert response.json() == {"database": "connected"}

    response = await client.get("/health/cache")
    assert response.json() == {"cache": "connected", "backend": "memory"}


@pytest.mark.asyncio
async def test_out_of_range_ids_are_404(client):
    response = await client.get("/notes/99999999999999999999", headers=ALICE)
    assert response.status_code == 404

    note = await _create_note(client)
    response = await client.post(
        f"/notes/{note['id']}/share", json={"userId": 99999999999999999999}, headers=ALICE
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_non_string_role_claim_is_rejected(client):
    token = create_access_token({"sub": "1", "role": 1})
    response = await client.get("/notes", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
