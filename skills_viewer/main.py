from __future__ import annotations

import sys
from typing import Optional

import typer
import uvicorn

from skills_viewer.config import get_settings
from skills_viewer.domain.models import UserQuery
from skills_viewer.infrastructure.db_factory import PooledQueryRunner
from skills_viewer.queries.listing import check_database, list_licenses, list_users
from skills_viewer.queries.order_by import CatalogOrderColumnResolver
from skills_viewer.reporter import print_db_check, print_envelope
from skills_viewer.utils.logging import configure_logging

app = typer.Typer(help="Skills Viewer: read-only dashboard over the user and license tables.")


def _runner() -> PooledQueryRunner:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return PooledQueryRunner(settings=settings)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} "
        f"schema={settings.db_schema} ssl={'on' if settings.db_ssl else 'off'} | "
        f"pool={settings.db_conn_limit} | base_url={settings.base_url}"
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default from settings)."),
) -> None:
    """
    Serve the JSON endpoints and the HTML dashboard.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    uvicorn.run(
        "skills_viewer.api:create_app",
        factory=True,
        host=host or settings.app_host,
        port=port or settings.app_port,
        log_config=None,
    )


@app.command()
def users(
    page: Optional[str] = typer.Option(None, "--page", help="Page number (>= 1)."),
    page_size: Optional[str] = typer.Option(None, "--page-size", help="Rows per page (1-100)."),
    school: Optional[str] = typer.Option(None, "--school", help="School substring."),
    exclude_test: bool = typer.Option(False, "--exclude-test", help="Hide test accounts."),
    q: Optional[str] = typer.Option(None, "--q", "-q", help="Substring of name or email."),
) -> None:
    """
    Print one page of users.
    """
    runner = _runner()
    settings = get_settings()
    query = UserQuery(
        page=page,
        page_size=page_size,
        school=school,
        exclude_test="true" if exclude_test else None,
        q=q,
    )
    envelope = list_users(
        runner,
        query,
        order_resolver=CatalogOrderColumnResolver(runner, settings.db_schema),
        expose_errors=True,
    )
    print_envelope(envelope, title="Users")
    if not envelope.success:
        raise typer.Exit(code=1)


@app.command()
def licenses() -> None:
    """
    Print the first 100 licenses.
    """
    runner = _runner()
    envelope = list_licenses(
        runner,
        order_resolver=CatalogOrderColumnResolver(runner, get_settings().db_schema),
        expose_errors=True,
    )
    print_envelope(envelope, title="Licenses")
    if not envelope.success:
        raise typer.Exit(code=1)


@app.command("db-check")
def db_check() -> None:
    """
    Run the database liveness probe.
    """
    result = check_database(_runner(), expose_errors=True)
    print_db_check(result)
    if not result["success"]:
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
