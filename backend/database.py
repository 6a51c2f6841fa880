import hashlib
import json
import logging
import sqlite3
import threading
import uuid
import weakref
from datetime import datetime, timezone
from typing import Optional
from contextlib import contextmanager

import config
from models import Task

logger = logging.getLogger(__name__)

DATABASE_PATH = config.DATABASE_PATH

@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Initialize database by running Alembic migrations."""
    import subprocess
    import os

    # Run alembic upgrade from the backend directory, against the file this
    # process uses (relative paths resolve from our cwd, not backend/)
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    env = dict(os.environ, DATABASE_PATH=os.path.abspath(DATABASE_PATH))
    subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=backend_dir,
        env=env,
        check=True
    )
    logger.info("Database ready at %s", env["DATABASE_PATH"])

def derive_store_id(user_id: str) -> str:
    """Deterministic storage key for a user: SHA-256 hex digest of the id."""
    return hashlib.sha256(user_id.encode("utf-8")).hexdigest()

def _load_tasks(conn: sqlite3.Connection, store_id: str) -> list[dict]:
    row = conn.execute(
        "SELECT tasks FROM task_stores WHERE store_id = ?",
        (store_id,)
    ).fetchone()
    if row is None:
        return []
    return json.loads(row["tasks"])


class TaskStore:
    """
    Append-only task list for a single user.

    The whole list lives in one row of task_stores as a JSON array and is
    read and written back as a unit. Appends are serialized twice: by a
    per-store lock within this process and by an immediate SQLite
    transaction across processes.
    """

    def __init__(self, user_id: str):
        self.user_id = user_id
        self.store_id = derive_store_id(user_id)
        self._lock = threading.Lock()

    def add(self, title: str, due_date: Optional[str] = None) -> Task:
        task = Task(
            id=str(uuid.uuid4()),
            title=title,
            due_date=due_date or None,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock, get_db() as conn:
            conn.execute("BEGIN IMMEDIATE")
            tasks = _load_tasks(conn, self.store_id)
            tasks.append(task.model_dump(by_alias=True, exclude_none=True))
            now = task.created_at
            conn.execute(
                """INSERT INTO task_stores (store_id, tasks, created_at, updated_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(store_id) DO UPDATE SET
                       tasks = excluded.tasks,
                       updated_at = excluded.updated_at""",
                (self.store_id, json.dumps(tasks), now, now)
            )
            conn.commit()
        logger.debug("Appended task %s to store %s (%d total)", task.id, self.store_id[:12], len(tasks))
        return task

    def list(self) -> list[Task]:
        with get_db() as conn:
            tasks = _load_tasks(conn, self.store_id)
        return [Task.model_validate(t) for t in tasks]


# Entries live only while some caller holds the store
_stores: "weakref.WeakValueDictionary[str, TaskStore]" = weakref.WeakValueDictionary()
_stores_lock = threading.Lock()

def get_task_store(user_id: str) -> TaskStore:
    """Return the one TaskStore for user_id, creating it on first use."""
    store_id = derive_store_id(user_id)
    with _stores_lock:
        store = _stores.get(store_id)
        if store is None:
            store = TaskStore(user_id)
            _stores[store_id] = store
        return store

def reset_task_stores():
    """Forget cached store instances (persisted data is untouched)."""
    with _stores_lock:
        _stores.clear()
