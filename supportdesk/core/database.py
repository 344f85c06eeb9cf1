"""Database engine and session management."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Database:
    """
    Engine plus session factory for one database URL.

    Built once at startup and handed to the app (app.state.database) and to CLI
    scripts; there is no module-level engine.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        engine_kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection so every session sees the same in-memory DB.
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True
        self.engine = create_engine(url, **engine_kwargs)
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """Create all tables (tests and local SQLite runs; deployments use alembic)."""
        from supportdesk.models import Base

        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
