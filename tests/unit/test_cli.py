from __future__ import annotations

from rich.console import Console
from typer.testing import CliRunner

from skills_viewer import main as cli
from skills_viewer.domain.models import ResultEnvelope
from skills_viewer.reporter import print_envelope

runner = CliRunner()


def test_print_envelope_hides_password_and_shows_range() -> None:
    console = Console(record=True, width=200)
    envelope = ResultEnvelope(
        success=True,
        data=[{"id": 11, "name": "kim", "password": "pw"}],
        page=2,
        page_size=10,
        total=25,
        total_pages=3,
    )
    print_envelope(envelope, title="Users", console=console)

    text = console.export_text()
    assert "kim" in text
    assert "password" not in text
    assert "showing 11-20 of 25" in text


def test_print_envelope_failure() -> None:
    console = Console(record=True, width=200)
    print_envelope(ResultEnvelope.failure("Database query failed"), title="Users", console=console)
    assert "Users: Database query failed" in console.export_text()


def test_users_command_passes_filters(monkeypatch, fake_runner_factory) -> None:
    fake = fake_runner_factory(rows=[{"id": 1, "name": "kim"}], total=1)
    monkeypatch.setattr(cli, "_runner", lambda: fake)

    result = runner.invoke(cli.app, ["users", "--school", "ABC", "--exclude-test", "--page-size", "5"])

    assert result.exit_code == 0, result.output
    assert "kim" in result.output
    data_sql, data_params = fake.data_calls()[0]
    assert '"school" LIKE %s AND "name" NOT LIKE %s' in data_sql
    assert data_params[-2:] == [5, 0]


def test_licenses_command_fails_on_error(monkeypatch, fake_runner_factory) -> None:
    fake = fake_runner_factory(error=RuntimeError("no such table"))
    monkeypatch.setattr(cli, "_runner", lambda: fake)

    result = runner.invoke(cli.app, ["licenses"])

    assert result.exit_code == 1
    assert "no such table" in result.output


def test_db_check_command(monkeypatch, fake_runner_factory) -> None:
    fake = fake_runner_factory(handler=lambda sql, params: [{"ok": 1}])
    monkeypatch.setattr(cli, "_runner", lambda: fake)

    result = runner.invoke(cli.app, ["db-check"])

    assert result.exit_code == 0
    assert "Database reachable" in result.output
