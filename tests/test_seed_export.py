"""Unit tests for the seed-file observer and the first-run seed script."""

import tempfile
import unittest
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock

from _support import BaseAPITestCase, add_task, create_user, make_database
from supportdesk.models import Task, User
from supportdesk.scripts.seed import DEFAULT_ACCOUNTS, SAMPLE_TASKS, seed_database
from supportdesk.services.seed_export import SeedFileWriter, escape_sql_string, render_seed_sql


def _task(**kwargs: object) -> Task:
    values: dict = {
        "title": "T",
        "description": "",
        "content": "",
        "type": "Q&A",
        "category": "faq",
        "status": "approved",
        "rating": 0.0,
        "keywords": [],
        "user_id": 1,
    }
    values.update(kwargs)
    return Task(**values)


class TestRenderSeedSql(unittest.TestCase):
    """render_seed_sql emits a replayable script grouped by category."""

    def test_header_and_reset(self) -> None:
        sql = render_seed_sql([], now=datetime(2025, 6, 1, 12, 30, tzinfo=UTC))
        self.assertIn("-- Last updated: 2025-06-01 12:30:00", sql)
        self.assertIn("DELETE FROM tasks;", sql)
        self.assertIn("ALTER SEQUENCE tasks_id_seq RESTART WITH 1;", sql)
        self.assertNotIn("INSERT", sql)

    def test_quotes_are_escaped(self) -> None:
        sql = render_seed_sql([_task(title="Don't panic", keywords=["it's"])])
        self.assertIn("'Don''t panic'", sql)
        self.assertIn("'[\"it''s\"]'::jsonb", sql)
        self.assertEqual(escape_sql_string("a'b'c"), "a''b''c")

    def test_empty_keywords_and_missing_owner(self) -> None:
        sql = render_seed_sql([_task(keywords=[], user_id=None, rating=4.5)])
        self.assertIn("4.500000, '[]'::jsonb, NULL, NOW(), NOW());", sql)

    def test_keywords_are_jsonb_for_the_keywords_column(self) -> None:
        sql = render_seed_sql([_task(keywords=["vpn", "network"])])
        self.assertIn("'[\"vpn\", \"network\"]'::jsonb", sql)
        self.assertNotIn("ARRAY[", sql)

    def test_grouped_by_category(self) -> None:
        sql = render_seed_sql(
            [
                _task(title="a", category="faq"),
                _task(title="b", category="password-reset"),
                _task(title="c", category="faq"),
            ]
        )
        self.assertEqual(sql.count("-- Faq Tasks"), 1)
        self.assertEqual(sql.count("-- Password Reset Tasks"), 1)
        self.assertLess(sql.index("'c'"), sql.index("-- Password Reset Tasks"))


class TestSeedFileWriter(unittest.TestCase):
    def setUp(self) -> None:
        self.database = make_database()
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "scripts" / "seed_data.sql"

    def tearDown(self) -> None:
        self.tmp.cleanup()
        self.database.dispose()

    def test_write_skips_deleted_tasks(self) -> None:
        add_task(self.database, title="Kept")
        add_task(self.database, title="Gone", deleted_at=datetime.now(UTC))
        count = SeedFileWriter(self.database, self.path).write()
        self.assertEqual(count, 1)
        text = self.path.read_text(encoding="utf-8")
        self.assertIn("'Kept'", text)
        self.assertNotIn("'Gone'", text)

    def test_on_task_changed_swallows_failures(self) -> None:
        database = MagicMock()
        database.session.side_effect = RuntimeError("database unavailable")
        writer = SeedFileWriter(database, self.path)
        with self.assertLogs("supportdesk.services.seed_export", level="ERROR"):
            writer.on_task_changed("created", 1)
        self.assertFalse(self.path.exists())


class TestSeedFileAfterRequests(BaseAPITestCase):
    """With SEED_FILE_PATH set, task writes regenerate the file after the response."""

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.seed_path = Path(self.tmp.name) / "seed_data.sql"
        self.settings_overrides = {"SEED_FILE_PATH": str(self.seed_path)}
        super().setUp()

    def tearDown(self) -> None:
        super().tearDown()
        self.tmp.cleanup()

    def test_create_writes_seed_file(self) -> None:
        user = create_user(self.database, "u@x.com")
        res = self.client.post(
            "/api/dashboard/faq",
            json={"title": "Printer jams", "type": "Issue"},
            headers=self.auth(user),
        )
        self.assertEqual(res.status_code, 201)
        self.assertIn("'Printer jams'", self.seed_path.read_text(encoding="utf-8"))


class TestSeedDatabase(unittest.TestCase):
    def setUp(self) -> None:
        self.database = make_database()
        self.db = self.database.session()

    def tearDown(self) -> None:
        self.db.close()
        self.database.dispose()

    def test_seeds_accounts_and_articles_once(self) -> None:
        users_created, tasks_created = seed_database(self.db, "admin-pass", "user-pass")
        self.assertEqual(users_created, len(DEFAULT_ACCOUNTS))
        self.assertEqual(tasks_created, len(SAMPLE_TASKS))
        admin = self.db.query(User).filter(User.email == "admin@supportdesk.com").one()
        self.assertEqual(admin.role, "admin")
        categories = {t.category for t in self.db.query(Task).all()}
        self.assertEqual(len(categories), 6)
        self.assertTrue(all(t.status == "approved" for t in self.db.query(Task).all()))

        self.assertEqual(seed_database(self.db, "admin-pass", "user-pass"), (0, 0))

    def test_skips_when_users_exist(self) -> None:
        create_user(self.database, "someone@x.com")
        self.assertEqual(seed_database(self.db, "admin-pass", "user-pass"), (0, 0))
        self.assertEqual(self.db.query(Task).count(), 0)


if __name__ == "__main__":
    unittest.main()
