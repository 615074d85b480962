# tests/conftest.py
from __future__ import annotations

import os

# Keep the module-level app in libraryhub.main off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REMINDERS_ENABLED", "false")
os.environ.setdefault("SEED_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient

from libraryhub.core.config import Settings
from libraryhub.db.repository import LibraryRepository
from libraryhub.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        seed_on_startup=False,
        reminders_enabled=False,
    )


@pytest.fixture
def app(settings):
    # fresh in-memory database per test
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repo(db) -> LibraryRepository:
    return LibraryRepository(db)
