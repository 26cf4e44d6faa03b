"""Integration tests for end-to-end workflows."""

import pytest
from click.testing import CliRunner
from cleanops.cli.main import cli


def test_full_workflow(cli_runner, temp_db):
    """Test complete workflow: client → cleaners → job → invoice → payment run → summary."""
    db = ["--db-path", temp_db.database_path]

    # Step 1: Create client
    result = cli_runner.invoke(
        cli,
        [
            *db,
            "client",
            "create",
            "Acme Offices",
            "--email",
            "office@acme.example.com",
            "--phone",
            "+44 161 496 0000",
            "--address",
            "10 Market Street",
            "--postcode",
            "M1 1AE",
            "--city",
            "Manchester",
            "--price",
            "20",
            "--deep-clean-price",
            "30",
            "--type",
            "commercial",
        ],
    )
    assert result.exit_code == 0
    client_id = None
    for line in result.output.split("\n"):
        if "ID:" in line:
            # Extract client ID from output like "Created client 'Acme Offices' (ID: 1)"
            client_id = line.split("ID:")[1].strip().rstrip(")")
            break
    assert client_id is not None

    # Step 2: Create cleaners
    for name, rate in (("Maria Lopez", "12"), ("Ana Silva", "15")):
        result = cli_runner.invoke(
            cli,
            [
                *db,
                "professional",
                "create",
                name,
                "--email",
                f"{name.split()[0].lower()}@example.com",
                "--phone",
                "07700 900456",
                "--rate",
                rate,
                "--days",
                "all",
            ],
        )
        assert result.exit_code == 0

    # Step 3: Schedule a weekly job and a one-off deep clean
    result = cli_runner.invoke(
        cli,
        [*db, "job", "create", client_id, "--date", "2024-03-04", "--start", "09:00",
         "--duration", "2", "--cleaner", "Maria Lopez", "--cleaner", "Ana Silva", "--weekly"],
    )
    assert result.exit_code == 0
    assert "Price: £80.00  Cost: £54.00" in result.output

    result = cli_runner.invoke(
        cli,
        [*db, "job", "create", "Acme Offices", "--date", "2024-03-06", "--start", "14:00",
         "--duration", "1h30m", "--cleaner", "Ana Silva", "--deep-clean", "--status", "completed"],
    )
    assert result.exit_code == 0
    # Ana has no deep-clean rate, so her regular rate applies
    assert "Price: £45.00  Cost: £22.50" in result.output

    # Step 4: Complete the first job and one later visit
    result = cli_runner.invoke(cli, [*db, "job", "update", "1", "--status", "completed"])
    assert result.exit_code == 0
    result = cli_runner.invoke(cli, [*db, "job", "set-occurrence", "1", "2024-03-11", "cancelled"])
    assert result.exit_code == 0

    result = cli_runner.invoke(
        cli, [*db, "job", "occurrences", "--start-date", "2024-03-04", "--end-date", "2024-03-17"]
    )
    assert result.exit_code == 0
    assert "2024-03-11 Mon 09:00" in result.output
    assert "cancelled" in result.output

    # Step 5: Invoice the completed work
    result = cli_runner.invoke(
        cli, [*db, "invoice", "generate", "Acme Offices", "--start-date", "2024-03-01", "--end-date", "2024-03-31"]
    )
    assert result.exit_code == 0
    assert "Created draft invoice INV-000001" in result.output
    assert "Total:  £125.00" in result.output

    for command in ("send", "pay"):
        result = cli_runner.invoke(cli, [*db, "invoice", command, "INV-000001"])
        assert result.exit_code == 0

    # Step 6: Pay the cleaners for the week
    result = cli_runner.invoke(
        cli, [*db, "payrun", "create", "--start-date", "2024-03-04", "--end-date", "2024-03-10"]
    )
    assert result.exit_code == 0
    assert "2 cleaner(s), total £76.50" in result.output

    result = cli_runner.invoke(cli, [*db, "payrun", "pay", "1", "2"])
    assert result.exit_code == 0

    # Step 7: Check the month's figures
    result = cli_runner.invoke(
        cli, [*db, "finance", "summary", "--start-date", "2024-03-01", "--end-date", "2024-03-31"]
    )
    assert result.exit_code == 0
    assert "Completed jobs 2024-03-01 to 2024-03-31: 2" in result.output
    assert "£125.00" in result.output
    assert "£76.50" in result.output
    assert "£48.50" in result.output
