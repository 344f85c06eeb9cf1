"""Shared helpers: fresh app + in-memory database per test, token and user shortcuts."""

import os
import unittest

from fastapi.testclient import TestClient
from pydantic import SecretStr

from supportdesk.core import security
from supportdesk.core.config import Settings
from supportdesk.core.database import Database
from supportdesk.main import create_app
from supportdesk.models import Task, User
from supportdesk.services.users import CredentialStore

# Full-cost bcrypt makes every test user take ~250ms.
security.BCRYPT_ROUNDS = 4

TEST_SECRET = os.environ["JWT_SECRET"]


def make_settings(**overrides: object) -> Settings:
    values: dict = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr(TEST_SECRET),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database() -> Database:
    database = Database("sqlite://")
    database.create_all()
    return database


def create_user(database: Database, email: str, password: str = "secret1", role: str = "user") -> User:
    db = database.session()
    try:
        user = CredentialStore(db).create(email, password, role)
        db.expunge(user)
        return user
    finally:
        db.close()


def add_task(database: Database, **fields: object) -> int:
    values: dict = {
        "title": "Sample",
        "description": "",
        "content": "",
        "type": "Q&A",
        "category": "faq",
        "status": "approved",
        "keywords": [],
    }
    values.update(fields)
    db = database.session()
    try:
        task = Task(**values)
        db.add(task)
        db.commit()
        return task.id
    finally:
        db.close()


class BaseAPITestCase(unittest.TestCase):
    """Each test gets its own app, in-memory database and TestClient."""

    settings_overrides: dict = {}

    def setUp(self) -> None:
        self.settings = make_settings(**self.settings_overrides)
        self.database = make_database()
        self.app = create_app(self.settings, self.database)
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        self.database.dispose()

    def token_for(self, user: User) -> str:
        return security.create_access_token(user.id, user.role, self.settings)

    def auth(self, user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token_for(user)}"}

    def login(self, email: str, password: str) -> dict[str, str]:
        res = self.client.post("/api/auth/login", json={"email": email, "password": password})
        self.assertEqual(res.status_code, 200, res.text)
        return {"Authorization": f"Bearer {res.json()['token']}"}
