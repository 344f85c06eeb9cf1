"""
Seed-file export: regenerate a SQL script reproducing the current tasks.

Runs as a best-effort observer after task writes (scheduled with FastAPI
BackgroundTasks, so after the response is sent). Failures are logged and
never propagate to the request that triggered them.
"""

import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from supportdesk.models import Task

if TYPE_CHECKING:
    from supportdesk.core.database import Database

logger = logging.getLogger(__name__)


def escape_sql_string(value: str) -> str:
    """Escape single quotes for a SQL string literal."""
    return value.replace("'", "''")


def _keywords_literal(keywords: list[str] | None) -> str:
    """Render keywords as a jsonb literal; an empty list is '[]', never NULL."""
    encoded = json.dumps(list(keywords or []), ensure_ascii=False)
    return f"'{escape_sql_string(encoded)}'::jsonb"


def render_seed_sql(tasks: list[Task], now: datetime | None = None) -> str:
    """
    Build the seed script: clear tasks, reset the id sequence, then one INSERT
    per task grouped by category (categories in first-seen order).
    """
    now = now or datetime.now(UTC)
    lines = [
        "-- Auto-generated seed file",
        f"-- Last updated: {now.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "-- Clear existing tasks",
        "DELETE FROM tasks;",
        "",
        "-- Reset tasks id sequence",
        "ALTER SEQUENCE tasks_id_seq RESTART WITH 1;",
        "",
        "-- Insert current tasks",
    ]

    by_category: dict[str, list[Task]] = {}
    for task in tasks:
        by_category.setdefault(task.category, []).append(task)

    for category, category_tasks in by_category.items():
        lines.append("")
        lines.append(f"-- {category.replace('-', ' ').title()} Tasks")
        for task in category_tasks:
            user_id = "NULL" if task.user_id is None else str(int(task.user_id))
            lines.append(
                "INSERT INTO tasks (title, description, content, type, category, status, "
                "rating, keywords, user_id, created_at, updated_at)"
            )
            lines.append("VALUES ")
            lines.append(
                f"('{escape_sql_string(task.title)}', "
                f"'{escape_sql_string(task.description or '')}', "
                f"'{escape_sql_string(task.content or '')}', "
                f"'{escape_sql_string(task.type)}', "
                f"'{escape_sql_string(task.category)}', "
                f"'{escape_sql_string(task.status)}', "
                f"{float(task.rating or 0):f}, "
                f"{_keywords_literal(task.keywords)}, "
                f"{user_id}, NOW(), NOW());"
            )
    return "\n".join(lines) + "\n"


class SeedFileWriter:
    """Observer that rewrites the seed file from a fresh session."""

    def __init__(self, database: "Database", path: str | Path) -> None:
        self.database = database
        self.path = Path(path)

    def write(self) -> int:
        """Write the seed file atomically; return the number of tasks exported."""
        db = self.database.session()
        try:
            tasks = (
                db.query(Task)
                .filter(Task.deleted_at.is_(None))
                .order_by(Task.id)
                .all()
            )
            sql = render_seed_sql(tasks)
        finally:
            db.close()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".seed-", suffix=".sql")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(sql)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        return len(tasks)

    def on_task_changed(self, event: str, task_id: int) -> None:
        try:
            count = self.write()
        except Exception:
            logger.exception(
                "Seed file update failed after %s of task %s (path=%s)", event, task_id, self.path
            )
            return
        logger.debug("Seed file %s rewritten with %s tasks after %s", self.path, count, event)
