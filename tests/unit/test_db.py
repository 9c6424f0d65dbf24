"""
Startup schema handling: init_models only touches the database in create_all mode.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core import db
from app.core.base import Base
from app.core.config import settings


@pytest.fixture
def engine(monkeypatch):
    conn = AsyncMock()
    fake = MagicMock()
    fake.begin.return_value.__aenter__.return_value = conn
    monkeypatch.setattr(db, "engine", fake)
    return fake


async def test_create_all_mode_builds_missing_tables(engine, monkeypatch):
    monkeypatch.setattr(settings, "DB_MANAGE", "create_all")

    await db.init_models()

    conn = engine.begin.return_value.__aenter__.return_value
    conn.run_sync.assert_awaited_once_with(Base.metadata.create_all)
    assert {"booking", "patient_report", "medication", "staff_member"} <= set(Base.metadata.tables)


async def test_external_mode_leaves_schema_alone(engine, monkeypatch, caplog):
    monkeypatch.setattr(settings, "DB_MANAGE", "external")

    with caplog.at_level("INFO", logger="app.core.db"):
        await db.init_models()

    engine.begin.assert_not_called()
    assert "leaving the schema untouched" in caplog.text
