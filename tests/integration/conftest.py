"""
Fixtures for tests against a real PostgreSQL database.

Set TEST_DATABASE_URL (postgresql+asyncpg://...) to run them. Tables are
created once per test and dropped afterwards.
"""

import os
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.base import Base
from app.modules.bookings import models as _bookings  # noqa: F401
from app.modules.reports import models as _reports  # noqa: F401
from app.modules.accounting import models as _accounting  # noqa: F401
from app.modules.staff import models as _staff  # noqa: F401

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest.fixture
async def db_session():
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL not set")
    engine = create_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with maker() as session:
        yield session
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
