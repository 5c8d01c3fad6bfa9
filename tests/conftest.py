# tests/conftest.py

import os
from typing import AsyncGenerator

# The application engine is created at import time: point it at the test database first.
TEST_DATABASE_URL = os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_crm.db")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from crm.main import app as main_app  # noqa: E402
from crm.core import dependencies as deps  # noqa: E402
from crm.core.database import get_session  # noqa: E402

# --- every table model has to be imported for create_all ---
from crm.domains.models import *  # noqa: F401, F403, E402

from crm.domains.prt import models as prt_models  # noqa: E402
from crm.domains.prt import crud as prt_crud  # noqa: E402
from crm.domains.prt import schemas as prt_schemas  # noqa: E402
from crm.domains.adr import models as adr_models  # noqa: E402
from crm.domains.tag import models as tag_models  # noqa: E402
from crm.domains.rel import models as rel_models  # noqa: E402


# --- test database ---
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    future=True,
    poolclass=NullPool,     # every connection is opened and closed independently
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# --- database fixtures ---
@pytest_asyncio.fixture(scope="session", autouse=True)
async def setup_database():
    """
    Drops and recreates every table once per test session and drops them again at the end.
    """
    print("\nDEBUG: Setting up database for session...")
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session of a single test. The CRUD layer commits, so every row is
    deleted again once the test is done to keep the tests independent.
    """
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            for table in reversed(SQLModel.metadata.sorted_tables):
                await conn.execute(table.delete())


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient bound to the FastAPI app with the test session injected.
    """

    def override_get_session_and_dependency():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()

    try:
        main_app.dependency_overrides[get_session] = override_get_session_and_dependency
        main_app.dependency_overrides[deps.get_db_session] = override_get_session_and_dependency

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client

    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- shared domain fixtures ---
@pytest_asyncio.fixture(name="test_person")
async def test_person_fixture(db_session: AsyncSession) -> prt_models.Partner:
    """Natural person partner created through the CRUD layer (gets a partner number)."""
    return await prt_crud.partner.create(
        db_session,
        obj_in=prt_schemas.PartnerCreate(first_name="Anna", last_name="Muster", title="Dr."),
    )


@pytest_asyncio.fixture(name="test_company")
async def test_company_fixture(db_session: AsyncSession) -> prt_models.Partner:
    """Legal entity partner created through the CRUD layer."""
    return await prt_crud.partner.create(
        db_session,
        obj_in=prt_schemas.PartnerCreate(
            legal_name="Acme Holding AG",
            trading_name="Acme",
            registration_number="CHE-123.456.789",
            jurisdiction="ZH",
        ),
    )


@pytest_asyncio.fixture(name="test_address")
async def test_address_fixture(db_session: AsyncSession) -> adr_models.Address:
    address = adr_models.Address(
        street_line1="Bahnhofstrasse 1",
        city="Zurich",
        postal_code="8001",
        country_code="CH",
    )
    db_session.add(address)
    await db_session.commit()
    await db_session.refresh(address)
    return address


@pytest_asyncio.fixture(name="test_tag")
async def test_tag_fixture(db_session: AsyncSession) -> tag_models.Tag:
    tag = tag_models.Tag(tag_name="VIP", color_hex="#FF0000", description="Important partners")
    db_session.add(tag)
    await db_session.commit()
    await db_session.refresh(tag)
    return tag


@pytest_asyncio.fixture(name="test_relationship_type")
async def test_relationship_type_fixture(db_session: AsyncSession) -> rel_models.RelationshipType:
    rel_type = rel_models.RelationshipType(type_name="Employee", description="Works for")
    db_session.add(rel_type)
    await db_session.commit()
    await db_session.refresh(rel_type)
    return rel_type
