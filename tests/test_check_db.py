"""Tests for the database inspection script."""

import importlib.util
import uuid
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import MetaData, Table, create_engine, insert

from portfolai.core.database import Base
import portfolai.models  # noqa: F401

_SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "check_db.py"


@pytest.fixture
def check_db():
    spec = importlib.util.spec_from_file_location("check_db", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_sample_rows_redact_password_hash(check_db):
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(Base.metadata.tables["users"]).values(
                id=uuid.UUID(int=1),
                email="advisor@example.com",
                password_hash="$2b$12$secret",
                full_name="Ada Advisor",
                created_at=datetime(2024, 1, 1),
                updated_at=datetime(2024, 1, 1),
            )
        )
        users = Table("users", MetaData(), autoload_with=conn)
        rows = check_db._sample_rows(conn, users, limit=10)

    assert rows[0]["email"] == "advisor@example.com"
    assert rows[0]["password_hash"] == "[REDACTED]"
