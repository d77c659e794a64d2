"""
Pytest configuration for the Skills Viewer dashboard.

Provides fixtures for:
- A fake query runner for unit tests (no database needed)
- Database connection management for integration tests
- Demo data seeding
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence

import psycopg
import pytest

from skills_viewer.config import Settings
from skills_viewer.infrastructure.db_factory import build_conninfo


class FakeRunner:
    """
    In-memory QueryRunner.

    Answers COUNT queries with `total`, catalog probes with `catalog_columns`
    and everything else with `rows`. Every call is recorded in `calls`.
    """

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        total: Optional[int] = None,
        catalog_columns: Sequence[str] = (),
        error: Optional[Exception] = None,
        handler: Optional[Callable[[str, List[Any]], List[Dict[str, Any]]]] = None,
    ) -> None:
        self.rows = rows or []
        self.total = len(self.rows) if total is None else total
        self.catalog_columns = list(catalog_columns)
        self.error = error
        self.handler = handler
        self.calls: List[tuple[str, List[Any]]] = []

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append((query, list(params)))
        if self.error is not None:
            raise self.error
        if self.handler is not None:
            return self.handler(query, list(params))
        if "information_schema.columns" in query:
            return [{"column_name": name} for name in self.catalog_columns]
        if "COUNT(*)" in query:
            return [{"total": self.total}]
        return [dict(row) for row in self.rows]

    def data_calls(self) -> List[tuple[str, List[Any]]]:
        return [
            call
            for call in self.calls
            if "COUNT(*)" not in call[0] and "information_schema" not in call[0]
        ]


@pytest.fixture
def fake_runner_factory() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASS", "postgres"),
        db_name=os.getenv("DB_NAME", "nursing_skills"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_conninfo(test_settings: Settings) -> str:
    return build_conninfo(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_conninfo: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_conninfo, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_conninfo: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_conninfo)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def seeded_db(db_connection: psycopg.Connection, test_conninfo: str) -> int:
    """
    Recreate and seed the user/license tables.

    Returns the number of users seeded.
    """
    from scripts.seed_data import (
        LICENSE_COLUMNS,
        USER_COLUMNS,
        _copy_into_db,
        _generate_licenses_csv,
        _generate_users_csv,
    )

    users_to_seed = 25

    with db_connection.cursor() as cur:
        cur.execute('DROP TABLE IF EXISTS "user", "license";')
    db_connection.commit()

    with tempfile.TemporaryDirectory() as tmpdir:
        users_csv = Path(tmpdir) / "users.csv"
        licenses_csv = Path(tmpdir) / "licenses.csv"
        _generate_users_csv(users_csv, rows=users_to_seed, seed=42)
        _generate_licenses_csv(licenses_csv, rows=120, users=users_to_seed, seed=42)
        _copy_into_db(test_conninfo, "user", USER_COLUMNS, users_csv)
        _copy_into_db(test_conninfo, "license", LICENSE_COLUMNS, licenses_csv)

    return users_to_seed
