"""HTTP contract for the duplicates router, served in-process."""

import uuid

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from crm_dedup.core.dependencies import get_db
from crm_dedup.main import app
from crm_dedup.repositories.duplicate_candidate_repository import DuplicateCandidateRepository
from crm_dedup.routers import health


pytestmark = [pytest.mark.db, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


async def seed_email_duplicates(db, factory):
    ws = await factory.workspace()
    a = await factory.person(ws, first_name="Alice", email="alice@x.com")
    b = await factory.person(ws, first_name="Alice", email="Alice@X.com", phone="555-1000")
    await db.commit()
    return ws, a, b


async def test_workspace_header_is_required(client):
    response = await client.get("/people/duplicates")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ARGUMENT"


async def test_workspace_header_must_be_a_uuid(client):
    response = await client.get("/people/duplicates", headers={"X-Workspace-ID": "not-a-uuid"})

    assert response.status_code == 400


async def test_scan_then_list(client, db, factory):
    ws, a, b = await seed_email_duplicates(db, factory)
    headers = {"X-Workspace-ID": str(ws.id)}

    scan = await client.post("/people/duplicates/scan", headers=headers)
    assert scan.status_code == 200
    assert scan.json()["total"] == 1

    listing = await client.get("/people/duplicates", headers=headers)
    assert listing.status_code == 200
    data = listing.json()["data"]
    assert len(data) == 1
    assert {data[0]["person_a"]["id"], data[0]["person_b"]["id"]} == {str(a.id), str(b.id)}
    assert data[0]["match_type"] == "email"
    assert "email" in data[0]["reason"]


async def test_dismiss_flow(client, db, factory):
    ws, _, _ = await seed_email_duplicates(db, factory)
    headers = {"X-Workspace-ID": str(ws.id)}

    await client.post("/people/duplicates/scan", headers=headers)
    candidate_id = (await client.get("/people/duplicates", headers=headers)).json()["data"][0]["id"]

    response = await client.post(f"/people/duplicates/{candidate_id}/dismiss", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert (await client.get("/people/duplicates", headers=headers)).json()["data"] == []


async def test_dismiss_candidate_from_another_workspace_is_not_found(client, db, factory):
    ws, _, _ = await seed_email_duplicates(db, factory)
    await client.post("/people/duplicates/scan", headers={"X-Workspace-ID": str(ws.id)})
    candidate_id = (
        await client.get("/people/duplicates", headers={"X-Workspace-ID": str(ws.id)})
    ).json()["data"][0]["id"]

    response = await client.post(
        f"/people/duplicates/{candidate_id}/dismiss",
        headers={"X-Workspace-ID": str(uuid.uuid4())},
    )

    assert response.status_code == 404
    assert response.json()["error"] == {
        "code": "NOT_FOUND",
        "message": "Duplicate candidate not found",
        "details": {"candidate_id": candidate_id},
    }


async def test_merge_self_is_a_bad_request(client, db, factory):
    ws, a, _ = await seed_email_duplicates(db, factory)

    response = await client.post(
        "/people/merge",
        headers={"X-Workspace-ID": str(ws.id)},
        json={"keep_id": str(a.id), "merge_id": str(a.id)},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Cannot merge a person with themselves"


async def test_merge_resolves_candidate(client, db, factory):
    ws, a, b = await seed_email_duplicates(db, factory)
    headers = {"X-Workspace-ID": str(ws.id)}
    await client.post("/people/duplicates/scan", headers=headers)
    candidate_id = (await client.get("/people/duplicates", headers=headers)).json()["data"][0]["id"]

    response = await client.post(
        "/people/merge",
        headers=headers,
        json={"keep_id": str(a.id), "merge_id": str(b.id), "candidate_id": candidate_id},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["merged_id"] == str(b.id)
    assert "phone" in body["fields_filled"]
    assert (await client.get("/people/duplicates", headers=headers)).json()["data"] == []

    again = await client.post(
        "/people/merge",
        headers=headers,
        json={"keep_id": str(a.id), "merge_id": str(b.id)},
    )
    assert again.status_code == 404


async def test_list_limit_is_validated(client, db, factory):
    ws, _, _ = await seed_email_duplicates(db, factory)

    response = await client.get(
        "/people/duplicates",
        params={"limit": 0},
        headers={"X-Workspace-ID": str(ws.id)},
    )

    assert response.status_code == 422


async def test_health_reports_database_without_migrations(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["api_ok"] is True
    assert body["db_ok"] is True
    assert body["schema_revision"] is None
    assert body["schema_up_to_date"] is False


async def test_commit_failure_is_reported_as_store_unavailable(client, db, factory, session_maker, monkeypatch):
    ws, _, _ = await seed_email_duplicates(db, factory)

    async def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("connection reset"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)
    response = await client.post("/people/duplicates/scan", headers={"X-Workspace-ID": str(ws.id)})
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"
    async with session_maker() as session:
        assert await DuplicateCandidateRepository(session).list_pending(ws.id) == []


async def test_health_compares_stamped_revision_with_shipped_head(client, db, monkeypatch):
    monkeypatch.setattr(health, "expected_schema_revision", lambda: "3c1e9a7d2b40")
    await db.execute(text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL PRIMARY KEY)"))
    await db.execute(text("INSERT INTO alembic_version (version_num) VALUES ('3c1e9a7d2b40')"))
    await db.commit()

    body = (await client.get("/health")).json()

    assert body["schema_revision"] == "3c1e9a7d2b40"
    assert body["expected_schema_revision"] == "3c1e9a7d2b40"
    assert body["schema_up_to_date"] is True

    await db.execute(text("DROP TABLE alembic_version"))
    await db.commit()
