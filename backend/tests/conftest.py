"""
Shared pytest fixtures for backend tests.
Each test gets its own SQLite file for isolation.
"""
from datetime import datetime

import pytest
import sqlite3
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database

# Fixed "now" for everything date-related: Friday 2025-01-24, mid-afternoon
FIXED_NOW = datetime(2025, 1, 24, 15, 30)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    monkeypatch.setattr(database, "init_db", lambda: None)

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE tasks (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            category TEXT NOT NULL DEFAULT 'work',
            priority TEXT NOT NULL DEFAULT 'medium',
            completed INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            due_date TEXT
        );
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def app_client(test_db, monkeypatch):
    """
    Create a test client for the FastAPI app with the clock pinned to FIXED_NOW.
    Mocks init_db to skip alembic migrations.
    """
    from fastapi.testclient import TestClient
    import main

    # Skip alembic in tests - tables already created by test_db fixture
    monkeypatch.setattr(main, "init_db", lambda: None)
    # Leave pytest's log capturing in place
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)
    main.app.dependency_overrides[main.get_now] = lambda: FIXED_NOW

    with TestClient(main.app) as client:
        yield client

    main.app.dependency_overrides.clear()
