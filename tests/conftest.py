"""Shared fixtures for the notification test suite."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "household-notifications-test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")


@pytest.fixture(autouse=True)
def setup_database():
    """Recreate every table before each test."""

    from app.config import reset_settings_cache
    from app.infrastructure import database

    reset_settings_cache()
    database.initialize_database()
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    reset_settings_cache()


@pytest.fixture()
def db_session():
    from app.infrastructure.database import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session):
    """Return a factory creating active members with password ``Secret123``."""

    from app.application.use_cases.users import create_user

    def _make_user(email: str, *, role: str = "child", family_id: int | None = 1, name: str | None = None):
        return create_user(
            db_session,
            name=name or email.split("@")[0].title(),
            email=email,
            password="Secret123",
            role=role,
            family_id=family_id,
        )

    return _make_user


@pytest.fixture()
def tick_clock(monkeypatch):
    """Give every stored notification a strictly later ``created_at``."""

    from app.infrastructure.repositories import notification_repository

    start = datetime(2024, 1, 1, 8, 0, 0)
    calls = {"count": 0}

    def _now() -> datetime:
        calls["count"] += 1
        return start + timedelta(seconds=calls["count"])

    monkeypatch.setattr(notification_repository, "now_in_app_naive_datetime", _now)
    return _now
