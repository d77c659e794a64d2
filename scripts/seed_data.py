"""
Demo data seeding for the Skills Viewer dashboard.

Creates the `user` and `license` tables when missing, generates deterministic
pseudo-random rows as CSV and loads them with Postgres COPY. Roughly one in
ten generated users carries the test-account marker in its name so the
"exclude test accounts" filter has something to hide.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path

import psycopg
import typer

from skills_viewer.infrastructure.db_factory import build_conninfo
from skills_viewer.queries.filters import TEST_MARKER

app = typer.Typer(help="Create demo user/license tables and load synthetic rows (CSV + COPY).")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS "user" (
    id BIGSERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    school TEXT,
    password TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE TABLE IF NOT EXISTS "license" (
    id BIGSERIAL PRIMARY KEY,
    user_id BIGINT NOT NULL,
    license_no TEXT NOT NULL,
    issued_at DATE NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

USER_COLUMNS = ["name", "email", "school", "password", "created_at"]
LICENSE_COLUMNS = ["user_id", "license_no", "issued_at", "created_at"]

_FAMILY_NAMES = ["김", "이", "박", "최", "정", "강", "조", "윤"]
_GIVEN_NAMES = ["민준", "서연", "도윤", "하은", "지호", "수아", "예준", "지민"]
_SCHOOLS = ["서울간호대학교", "부산보건대학교", "ABC 간호학교", "대전과학기술대학교"]


def _generate_users_csv(csv_path: Path, rows: int, seed: int) -> None:
    rng = random.Random(seed)
    base = datetime(2024, 1, 1, tzinfo=UTC)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(USER_COLUMNS)
        for i in range(rows):
            name = rng.choice(_FAMILY_NAMES) + rng.choice(_GIVEN_NAMES)
            if rng.random() < 0.1:
                name = f"{name}{TEST_MARKER}"
            created_at = base + timedelta(minutes=rng.randint(0, 500_000))
            writer.writerow(
                [
                    name,
                    f"user{i + 1}@example.com",
                    rng.choice(_SCHOOLS),
                    f"pbkdf2${rng.getrandbits(64):016x}",
                    created_at.isoformat(),
                ]
            )


def _generate_licenses_csv(csv_path: Path, rows: int, users: int, seed: int) -> None:
    rng = random.Random(seed + 1)
    base = datetime(2024, 1, 1, tzinfo=UTC)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(LICENSE_COLUMNS)
        for i in range(rows):
            issued = base + timedelta(days=rng.randint(0, 700))
            writer.writerow(
                [
                    rng.randint(1, max(users, 1)),
                    f"RN-{i + 1:06d}",
                    issued.date().isoformat(),
                    issued.isoformat(),
                ]
            )


def _copy_into_db(conninfo: str, table: str, columns: list[str], csv_path: Path) -> None:
    column_list = ", ".join(columns)
    with psycopg.connect(conninfo) as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
            with cur.copy(
                f'COPY "{table}" ({column_list}) FROM STDIN WITH (FORMAT csv, HEADER TRUE)'
            ) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
        conn.commit()


@app.command()
def main(
    users: int = typer.Option(250, "--users", "-u", help="Number of users to generate."),
    licenses: int = typer.Option(150, "--licenses", "-l", help="Number of licenses to generate."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    dsn: str | None = typer.Option(None, "--dsn", help="Optional conninfo/DSN override."),
) -> None:
    """
    Create tables if needed and load synthetic users and licenses.
    """
    start = time.perf_counter()
    tmpdir = Path(tempfile.mkdtemp(prefix="skills_viewer_seed_"))
    users_csv = tmpdir / "users.csv"
    licenses_csv = tmpdir / "licenses.csv"

    _generate_users_csv(users_csv, rows=users, seed=seed)
    _generate_licenses_csv(licenses_csv, rows=licenses, users=users, seed=seed)

    conninfo = dsn or build_conninfo()
    typer.echo(f"Loading {users:,} users and {licenses:,} licenses via COPY...")
    _copy_into_db(conninfo, "user", USER_COLUMNS, users_csv)
    _copy_into_db(conninfo, "license", LICENSE_COLUMNS, licenses_csv)
    typer.echo(f"Seed completed in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
