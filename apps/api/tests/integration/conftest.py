"""Integration test fixtures.

Migrations and seeds are applied once per session to the PostgreSQL container.
The seeded users each have an API key:

    testing    -> user_admin (admin)
    alice-key  -> user_alice
    bob-key    -> user_bob
    carol-key  -> user_carol
"""

import glob
import os
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Generator
from uuid import UUID

import asyncpg
import pytest
from litestar import Litestar
from litestar.testing import AsyncTestClient
from pytest_databases.docker.postgres import PostgresService

from app import _async_pg_init, create_app

MIGRATIONS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "migrations"))

SEEDS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "seeds"))

RIVERSIDE_COURT_ID = UUID("00000000-0000-0000-0000-000000000001")
LINCOLN_COURT_ID = UUID("00000000-0000-0000-0000-000000000002")
OAK_HILLS_COURT_ID = UUID("00000000-0000-0000-0000-000000000003")


def _apply_sql_dir(conn: Any, directory: str) -> None:
    """Apply all SQL files from a directory in sorted order."""
    for path in sorted(glob.glob(os.path.join(directory, "*.sql"))):
        with open(path, "r", encoding="utf-8") as f:
            sql_text = f.read()
        try:
            conn.execute(sql_text, prepare=False)
        except Exception as exc:
            raise RuntimeError(f"Failed applying SQL file: {path}") from exc
        conn.commit()


@pytest.fixture(scope="session")
def setup_test_db(postgres_connection: Any) -> Generator[None, Any, None]:
    """Set up test database with migrations and seed data."""
    _apply_sql_dir(postgres_connection, MIGRATIONS_DIR)
    _apply_sql_dir(postgres_connection, SEEDS_DIR)
    yield


@pytest.fixture(autouse=True)
def _database(setup_test_db: None) -> None:
    """Every integration test runs against the migrated and seeded database."""


def _dsn(postgres_service: PostgresService) -> str:
    return (
        f"postgresql://{postgres_service.user}:{postgres_service.password}"
        f"@{postgres_service.host}:{postgres_service.port}/{postgres_service.database}"
    )


@pytest.fixture
async def asyncpg_conn(postgres_service: PostgresService) -> AsyncIterator[asyncpg.Connection]:
    """Provide an asyncpg connection to the test database."""
    conn = await asyncpg.connect(_dsn(postgres_service))
    await _async_pg_init(conn)
    yield conn
    await conn.close()


@pytest.fixture
def client_for(
    postgres_service: PostgresService,
) -> Callable[[str | None], AbstractAsyncContextManager[AsyncTestClient[Litestar]]]:
    """Factory for test clients authenticated with a given API key.

    Usage:
        async with client_for("alice-key") as alice:
            ...
    """

    @asynccontextmanager
    async def _client(api_key: str | None) -> AsyncIterator[AsyncTestClient[Litestar]]:
        app = create_app(psql_dsn=_dsn(postgres_service))
        async with AsyncTestClient(app=app) as client:
            client.headers.update({"x-pytest-enabled": "1"})
            if api_key is not None:
                client.headers.update({"X-API-KEY": api_key})
            yield client

    return _client


@pytest.fixture
async def test_client(client_for) -> AsyncIterator[AsyncTestClient[Litestar]]:
    """Admin client."""
    async with client_for("testing") as client:
        yield client


@pytest.fixture
async def alice_client(client_for) -> AsyncIterator[AsyncTestClient[Litestar]]:
    async with client_for("alice-key") as client:
        yield client


@pytest.fixture
async def bob_client(client_for) -> AsyncIterator[AsyncTestClient[Litestar]]:
    async with client_for("bob-key") as client:
        yield client


@pytest.fixture
async def carol_client(client_for) -> AsyncIterator[AsyncTestClient[Litestar]]:
    async with client_for("carol-key") as client:
        yield client


@pytest.fixture
async def unauthenticated_client(client_for) -> AsyncIterator[AsyncTestClient[Litestar]]:
    """Client WITHOUT an API key, for endpoints that should reject anonymous requests."""
    async with client_for(None) as client:
        yield client


@pytest.fixture
async def fresh_court(asyncpg_conn: asyncpg.Connection) -> AsyncIterator[UUID]:
    """A court only the current test touches. Deleted afterwards, cascading to its suggestions."""
    court_id = await asyncpg_conn.fetchval(
        """
        INSERT INTO public.courts (
            name, address, city, state, zip, court_type, number_of_courts, surface,
            court_condition, hitting_wall, lighted, is_public
        )
        VALUES ('Maple Street Courts', '12 Maple St', 'Springfield', 'IL', '62703',
                'Outdoor', 2, 'Hard', 'Fair', false, false, true)
        RETURNING id
        """
    )
    yield court_id
    await asyncpg_conn.execute("DELETE FROM public.courts WHERE id = $1", court_id)


@pytest.fixture
async def clean_suggestions(asyncpg_conn: asyncpg.Connection) -> AsyncIterator[None]:
    """Remove suggestions and bans left by a test so pending-per-user rules start fresh."""
    yield
    await asyncpg_conn.execute("DELETE FROM public.court_edit_suggestions")
    await asyncpg_conn.execute("DELETE FROM public.user_bans")
