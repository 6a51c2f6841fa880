"""
Shared pytest fixtures for backend tests.
Uses a temp-file SQLite database per test for isolation.
"""
import pytest
import sqlite3
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    monkeypatch.setattr(database, "init_db", lambda: None)
    database.reset_task_stores()

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE task_stores (
            store_id TEXT PRIMARY KEY,
            tasks TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
    """)
    conn.commit()
    conn.close()

    yield db_path

    database.reset_task_stores()


@pytest.fixture
def app_client(test_db, monkeypatch):
    """
    Create a test client for the FastAPI app.
    Mocks init_db to skip alembic migrations.
    """
    from fastapi.testclient import TestClient
    import main

    # main imported init_db by name, so patch it there too
    monkeypatch.setattr(main, "init_db", lambda: None)

    with TestClient(main.app) as client:
        yield client


@pytest.fixture
def fake_model(monkeypatch):
    """
    Replace the hosted model call. Set `.result` to what the model returns,
    or `.error` to an exception it should raise. Sent messages are recorded.
    """
    import llm

    class FakeModel:
        def __init__(self):
            self.result = "Hello from the model"
            self.error = None
            self.calls = []

        async def __call__(self, messages, model=None):
            self.calls.append(messages)
            if self.error is not None:
                raise self.error
            return self.result

    fake = FakeModel()
    monkeypatch.setattr(llm, "run_model", fake)
    return fake
