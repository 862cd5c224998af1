"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import shutil
import uuid
from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio
import strawberry
from psycopg import Connection  # type: ignore[import]
from sqlalchemy.exc import IntegrityError

from alembic import command
from alembic.config import Config
from blogql.dbmodels import Authors, Posts

PROJECT_DIR = Path(__file__).parent.parent


@pytest.fixture(scope="function")
def test_database(postgresql: Connection[Any]) -> Generator[str, None, None]:
    """Return the DSN of the database pytest-postgresql created for this test."""
    info = postgresql.info
    yield (
        f"postgresql://{info.user}:{getattr(info, 'password', '') or ''}"
        f"@{info.host}:{info.port}/{info.dbname}"
    )


@pytest.fixture(scope="function")
def alembic_migrate(test_database: str) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the test database, and back down afterwards."""
    os.environ["BLOGQL_DATABASE_URL"] = test_database
    cfg = Config(str(PROJECT_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_DIR / "alembic"))
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest_asyncio.fixture(scope="function")
async def blog_database(alembic_migrate: None, test_database: str) -> AsyncGenerator[str, None]:
    """Point the shared connection pool at the migrated test database."""
    _ = alembic_migrate

    from blogql.database.connection import close_database, init_database, reset_database

    reset_database()
    init_database(test_database, force_reinit=True)

    yield test_database

    await close_database()


class FakeResult:
    """The subset of SQLAlchemy's Result API the resolvers use."""

    def __init__(self, rows: list[Any]):
        self._rows = rows

    def scalars(self) -> "FakeResult":
        return self

    def all(self) -> list[Any]:
        return list(self._rows)

    def scalar_one_or_none(self) -> Any:
        if len(self._rows) > 1:
            raise AssertionError("Multiple rows returned")
        return self._rows[0] if self._rows else None


class FakeStore:
    """In-memory stand-in for the authors/posts tables.

    Understands the single-entity SELECTs with equality filters that the
    resolvers issue, enforces the foreign key (RESTRICT) and the unique
    constraints, and records every executed statement.
    """

    def __init__(self) -> None:
        self.rows: dict[type, list[Any]] = {Authors: [], Posts: []}
        self.statements: list[Any] = []

    def select(self, stmt: Any) -> list[Any]:
        self.statements.append(stmt)
        entity = stmt.column_descriptions[0]["entity"]
        rows = self.rows[entity]
        # Anonymous bind params are named "<column>_<n>", e.g. author_id_1
        for key, value in stmt.compile().params.items():
            column = key.rsplit("_", 1)[0]
            rows = [row for row in rows if getattr(row, column) == value]
        return rows

    def queries_on(self, entity: type) -> int:
        return sum(
            1 for stmt in self.statements if stmt.column_descriptions[0]["entity"] is entity
        )

    def add_author(self, name: str, email: str) -> Authors:
        author = Authors(name=name, email=email)
        self._insert(author)
        return author

    def add_post(self, author: Authors, title: str, slug: str, **fields: Any) -> Posts:
        post = Posts(
            title=title,
            slug=slug,
            content=fields.get("content", ""),
            published=fields.get("published", False),
            author_id=author.id,
        )
        self._insert(post)
        return post

    def _insert(self, obj: Any) -> None:
        if isinstance(obj, Posts):
            if not any(a.id == obj.author_id for a in self.rows[Authors]):
                raise self._violation("posts_author_id_fkey", "foreign key")
            if obj.published is None:
                obj.published = False
        self._check_unique(obj)
        obj.id = uuid.uuid4()
        obj.created_at = datetime.now(UTC)
        self.rows[type(obj)].append(obj)

    def _check_unique(self, obj: Any) -> None:
        column, constraint = (
            ("email", "authors_email_key") if isinstance(obj, Authors) else ("slug", "posts_slug_key")
        )
        for row in self.rows[type(obj)]:
            if row is not obj and getattr(row, column) == getattr(obj, column):
                raise self._violation(constraint, "unique")

    def _delete(self, obj: Any) -> None:
        if isinstance(obj, Authors) and any(p.author_id == obj.id for p in self.rows[Posts]):
            raise self._violation("posts_author_id_fkey", "foreign key")
        self.rows[type(obj)].remove(obj)

    @staticmethod
    def _violation(constraint: str, kind: str) -> IntegrityError:
        return IntegrityError(
            "INSERT/UPDATE/DELETE",
            {},
            Exception(f'violates {kind} constraint "{constraint}"'),
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator["FakeSession", None]:
        session = FakeSession(self)
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


class FakeSession:
    """AsyncSession look-alike bound to a FakeStore."""

    def __init__(self, store: FakeStore):
        self.store = store
        self._new: list[Any] = []
        self._deleted: list[Any] = []

    async def execute(self, stmt: Any) -> FakeResult:
        return FakeResult(self.store.select(stmt))

    def add(self, obj: Any) -> None:
        self._new.append(obj)

    async def delete(self, obj: Any) -> None:
        self._deleted.append(obj)

    async def commit(self) -> None:
        new, deleted = self._new, self._deleted
        self._new, self._deleted = [], []
        for obj in new:
            self.store._insert(obj)
        for obj in deleted:
            self.store._delete(obj)
        for rows in self.store.rows.values():
            for row in rows:
                self.store._check_unique(row)

    async def rollback(self) -> None:
        self._new, self._deleted = [], []

    async def refresh(self, obj: Any) -> None:
        return None


@pytest.fixture
def store() -> Generator[FakeStore, None, None]:
    """Route every resolver's database session to an in-memory store."""
    fake = FakeStore()
    with (
        patch("blogql.graphql.resolvers.author.get_async_session", fake.session),
        patch("blogql.graphql.resolvers.post.get_async_session", fake.session),
    ):
        yield fake


@pytest.fixture
def mock_info():
    """Create a mock GraphQL info object with request context."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {"request": MagicMock()}
    return info


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(  # type: ignore[reportUnknownMemberType]
        "markers", "requires_db: mark test as requiring database connection"
    )
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]


def pytest_collection_modifyitems(config: Any, items: list[Any]) -> None:
    """Skip requires_db tests when no PostgreSQL server binaries are installed."""
    _ = config
    if shutil.which("pg_config") or shutil.which("pg_ctl"):
        return

    skip_db = pytest.mark.skip(reason="PostgreSQL binaries (pg_ctl/pg_config) not found")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)
