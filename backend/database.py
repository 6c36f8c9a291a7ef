import logging
import sqlite3
import subprocess
from contextlib import contextmanager
from datetime import date, datetime
from typing import Optional

import config
from models import CategorySummary, Task

logger = logging.getLogger(__name__)

DATABASE_PATH = config.DATABASE_PATH

CATEGORIES = ("work", "life")

# Columns a caller may change through update_task_db
UPDATABLE_FIELDS = {"title", "category", "priority", "completed", "due_date"}


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
    logger.info("Running migrations against %s", DATABASE_PATH)
    subprocess.run(
        ["alembic", "-x", f"db_path={DATABASE_PATH}", "upgrade", "head"],
        cwd=config.BACKEND_DIR,
        check=True
    )


def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        title=row["title"],
        category=row["category"],
        priority=row["priority"],
        completed=bool(row["completed"]),
        due_date=row["due_date"],
        created_at=row["created_at"],
    )


def _to_column(value):
    """Convert a Python value to its SQLite storage form."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def get_all_tasks(category: Optional[str] = None, completed: Optional[bool] = None) -> list[Task]:
    """
    List tasks, optionally filtered by category and/or completion state.
    Active tasks come first, then by priority (high first), due date
    (undated last) and creation time.
    """
    clauses = []
    params = []
    if category is not None:
        clauses.append("category = ?")
        params.append(category)
    if completed is not None:
        clauses.append("completed = ?")
        params.append(int(completed))
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    with get_db() as conn:
        rows = conn.execute(f"""
            SELECT * FROM tasks
            {where}
            ORDER BY
                completed,
                CASE priority
                    WHEN 'high' THEN 1
                    WHEN 'medium' THEN 2
                    ELSE 3
                END,
                due_date IS NULL,
                due_date,
                created_at
        """, params).fetchall()
        return [_row_to_task(row) for row in rows]


def get_task_db(task_id: str) -> Optional[Task]:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row:
            return _row_to_task(row)
    return None


def create_task_db(
    task_id: str,
    title: str,
    category: str = "work",
    priority: str = "medium",
    due_date: Optional[date] = None
) -> Task:
    """Create a task. New tasks always start out incomplete."""
    created_at = datetime.now().isoformat()
    with get_db() as conn:
        conn.execute(
            """INSERT INTO tasks
               (id, title, category, priority, completed, due_date, created_at)
               VALUES (?, ?, ?, ?, 0, ?, ?)""",
            (task_id, title, category, priority, _to_column(due_date), created_at)
        )
        conn.commit()

    logger.debug("Created task %s in %s", task_id, category)
    return Task(
        id=task_id,
        title=title,
        category=category,
        priority=priority,
        completed=False,
        due_date=due_date,
        created_at=created_at,
    )


def update_task_db(task_id: str, **updates) -> Optional[Task]:
    """
    Update a task with any fields provided.
    Only updates fields that differ from current values.

    Args:
        task_id: Task ID to update
        **updates: Field names and values to update (title, category, priority, completed, due_date)
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if not row:
            return None

        changes = {}
        for field, new_value in updates.items():
            if field not in UPDATABLE_FIELDS:
                continue
            new_value = _to_column(new_value)
            if new_value != row[field]:
                changes[field] = new_value

        if changes:
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [task_id]
            conn.execute(f"UPDATE tasks SET {set_clause} WHERE id = ?", values)
            conn.commit()
            logger.debug("Updated task %s: %s", task_id, sorted(changes))

        # Return updated task (re-fetch to get current state)
        updated_row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(updated_row)


def toggle_task_db(task_id: str) -> Optional[Task]:
    """Flip a task between active and completed."""
    with get_db() as conn:
        cursor = conn.execute(
            "UPDATE tasks SET completed = 1 - completed WHERE id = ?",
            (task_id,)
        )
        conn.commit()
        if cursor.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(row)


def delete_task_db(task_id: str) -> bool:
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        conn.commit()
        return cursor.rowcount > 0


def get_task_summary() -> dict[str, CategorySummary]:
    """Total / active / completed counts for every category, zeros included."""
    summary = {category: CategorySummary() for category in CATEGORIES}
    with get_db() as conn:
        rows = conn.execute("""
            SELECT category, COUNT(*) AS total, SUM(completed) AS done
            FROM tasks
            GROUP BY category
        """).fetchall()
    for row in rows:
        done = row["done"] or 0
        summary[row["category"]] = CategorySummary(
            total=row["total"],
            active=row["total"] - done,
            completed=done,
        )
    return summary
