"""Test environment: in-memory SQLite and a fixed JWT secret before any app import."""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests-only-0123456789")
