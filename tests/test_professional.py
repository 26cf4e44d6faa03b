"""Tests for professional commands."""

import pytest
from click.testing import CliRunner
from cleanops.cli.main import cli
from cleanops.domain.entities import Availability, ProfessionalStatus


def _create(cli_runner, temp_db, *extra):
    return cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "professional",
            "create",
            "Maria Lopez",
            "--email",
            "maria@example.com",
            "--phone",
            "07700 900456",
            "--rate",
            "12.50",
            *extra,
        ],
    )


def test_professional_create(cli_runner, temp_db):
    """Test creating a professional with the default working days."""
    result = _create(cli_runner, temp_db)

    assert result.exit_code == 0
    assert "Created professional 'Maria Lopez'" in result.output

    temp_db.disconnect()
    maria = temp_db.list_professionals()[0]
    assert maria.availability == Availability(mon=True, tue=True, wed=True, thu=True, fri=True)
    assert maria.status == ProfessionalStatus.ACTIVE


def test_professional_create_with_days(cli_runner, temp_db):
    result = _create(cli_runner, temp_db, "--days", "Monday, wed,sat")

    assert result.exit_code == 0
    temp_db.disconnect()
    assert temp_db.list_professionals()[0].availability == Availability(mon=True, wed=True, sat=True)


def test_professional_create_unknown_day(cli_runner, temp_db):
    result = _create(cli_runner, temp_db, "--days", "mon,funday")

    assert result.exit_code == 1
    assert "Unknown day(s): fun" in result.output


def test_professional_create_invalid_phone(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "professional",
            "create",
            "Maria Lopez",
            "--email",
            "maria@example.com",
            "--phone",
            "12345",
            "--rate",
            "12",
        ],
    )

    assert result.exit_code == 1
    assert "Invalid UK phone number" in result.output


def test_professional_list(cli_runner, temp_db, sample_professionals):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "professional", "list"])

    assert result.exit_code == 0
    assert "Maria Lopez" in result.output
    assert "Ana Silva" in result.output
    assert "deep £16.00" in result.output
    assert "mon,tue,wed,thu,fri,sat,sun" in result.output


def test_professional_update_status(cli_runner, temp_db, sample_professionals):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "professional", "update", "Ana Silva", "--status", "vacation"],
    )

    assert result.exit_code == 0
    assert "Updated professional 'Ana Silva'" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "professional", "list", "--status", "vacation"]
    )
    assert "Ana Silva" in result.output
    assert "Maria Lopez" not in result.output


def test_professional_delete_blocked(cli_runner, temp_db, make_job):
    make_job()
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "professional", "delete", "Maria Lopez", "--yes"]
    )

    assert result.exit_code == 1
    assert "assigned to 1 job" in result.output


def test_professional_delete(cli_runner, temp_db, sample_professionals):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "professional", "delete", "Ana Silva", "--yes"]
    )

    assert result.exit_code == 0
    assert "Deleted professional 'Ana Silva'" in result.output
