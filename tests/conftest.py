"""
Pytest configuration and shared fixtures.

Database tests run against an in-memory SQLite database by default. Point
TEST_DATABASE_URL at a scratch PostgreSQL database to run them against the
production dialect instead.
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from crm_dedup.db.base import Base
from crm_dedup.models import (
    Company,
    Interaction,
    InteractionPerson,
    Note,
    Person,
    PersonCompany,
    PersonTag,
    SocialProfile,
    Tag,
    Workspace,
)


TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


@pytest_asyncio.fixture
async def engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        test_engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(test_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        test_engine = create_async_engine(TEST_DATABASE_URL)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session
        await session.rollback()


class Factory:
    """Creates workspace rows for tests; every helper flushes so ids are usable immediately."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        # Explicit, increasing created_at so scan ordering is deterministic
        self._clock += timedelta(seconds=1)
        return self._clock

    async def workspace(self, name: Optional[str] = None) -> Workspace:
        workspace = Workspace(id=uuid.uuid4(), name=name or f"ws-{uuid.uuid4().hex[:8]}")
        self.db.add(workspace)
        await self.db.flush()
        return workspace

    async def person(self, workspace: Workspace, **fields) -> Person:
        fields.setdefault("created_at", self._tick())
        person = Person(id=uuid.uuid4(), workspace_id=workspace.id, **fields)
        self.db.add(person)
        await self.db.flush()
        return person

    async def company(self, workspace: Workspace, name: str, **fields) -> Company:
        company = Company(id=uuid.uuid4(), workspace_id=workspace.id, name=name, **fields)
        self.db.add(company)
        await self.db.flush()
        return company

    async def employ(self, person: Person, company: Company, role: Optional[str] = None) -> PersonCompany:
        link = PersonCompany(
            id=uuid.uuid4(),
            workspace_id=person.workspace_id,
            person_id=person.id,
            company_id=company.id,
            role=role,
        )
        self.db.add(link)
        await self.db.flush()
        return link

    async def tag(self, workspace: Workspace, name: str) -> Tag:
        tag = Tag(id=uuid.uuid4(), workspace_id=workspace.id, name=name)
        self.db.add(tag)
        await self.db.flush()
        return tag

    async def apply_tag(self, person: Person, tag: Tag) -> PersonTag:
        link = PersonTag(id=uuid.uuid4(), workspace_id=person.workspace_id, person_id=person.id, tag_id=tag.id)
        self.db.add(link)
        await self.db.flush()
        return link

    async def note(self, person: Person, content: str) -> Note:
        note = Note(id=uuid.uuid4(), workspace_id=person.workspace_id, person_id=person.id, content=content)
        self.db.add(note)
        await self.db.flush()
        return note

    async def interaction(self, workspace: Workspace, subject: str, *people: Person) -> Interaction:
        interaction = Interaction(
            id=uuid.uuid4(),
            workspace_id=workspace.id,
            interaction_type="email",
            subject=subject,
            occurred_at=self._tick(),
        )
        self.db.add(interaction)
        await self.db.flush()
        for person in people:
            self.db.add(
                InteractionPerson(
                    id=uuid.uuid4(),
                    workspace_id=workspace.id,
                    interaction_id=interaction.id,
                    person_id=person.id,
                    role="participant",
                )
            )
        await self.db.flush()
        return interaction

    async def social_profile(self, person: Person, platform: str, username: str) -> SocialProfile:
        profile = SocialProfile(
            id=uuid.uuid4(),
            workspace_id=person.workspace_id,
            person_id=person.id,
            platform=platform,
            username=username,
            profile_url=f"https://{platform}.example/{username}",
        )
        self.db.add(profile)
        await self.db.flush()
        return profile


@pytest.fixture
def factory(db):
    return Factory(db)
