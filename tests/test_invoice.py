"""Tests for invoice commands."""

import pytest
from datetime import date
from click.testing import CliRunner
from cleanops.cli.main import cli
from cleanops.domain.entities import InvoiceStatus

MARCH = ["--start-date", "2024-03-01", "--end-date", "2024-03-31"]


@pytest.fixture
def march_jobs(make_job):
    """Two completed £80 jobs in March and one scheduled job."""
    return [
        make_job(status="completed"),
        make_job(date=date(2024, 3, 25), status="completed"),
        make_job(date=date(2024, 3, 18)),
    ]


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "invoice", *args], **kwargs)


def test_invoice_generate(cli_runner, temp_db, march_jobs):
    """Test generating an invoice for a client's completed jobs."""
    result = _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)

    assert result.exit_code == 0
    assert "Created draft invoice INV-000001" in result.output
    assert "Period: 2024-03-01 to 2024-03-31" in result.output
    assert "Jobs:   2" in result.output
    assert "Total:  £160.00" in result.output


def test_invoice_generate_without_jobs_warns(cli_runner, temp_db, sample_client):
    result = _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)

    assert result.exit_code == 0
    assert "Total:  £0.00" in result.output
    assert "Warning: no completed, uninvoiced jobs" in result.output


def test_invoice_generate_due_days_out_of_range(cli_runner, temp_db, sample_client):
    result = _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH, "--due-days", "120")

    assert result.exit_code != 0
    assert "--due-days" in result.output


def test_invoice_generate_due_days_from_environment(cli_runner, temp_db, sample_client, monkeypatch):
    monkeypatch.setenv("CLEANOPS_INVOICE_DUE_DAYS", "14")
    result = _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)

    assert result.exit_code == 0
    temp_db.disconnect()
    invoice = temp_db.list_invoices()[0]
    assert (invoice.due_date - invoice.issue_date).days == 14


def test_invoice_generate_unknown_client(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "generate", "Nobody", *MARCH)

    assert result.exit_code == 1
    assert "Client 'Nobody' not found" in result.output


def test_invoice_second_generate_skips_invoiced_jobs(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    result = _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)

    assert result.exit_code == 0
    assert "Created draft invoice INV-000002" in result.output
    assert "Jobs:   0" in result.output


def test_invoice_show_by_number(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    result = _invoke(cli_runner, temp_db, "show", "inv-000001")

    assert result.exit_code == 0
    assert "Invoice INV-000001" in result.output
    assert "Client:  Jane Smith" in result.output
    assert "Status:  draft" in result.output
    assert f"job {march_jobs[0].id}" in result.output
    assert "£160.00" in result.output


def test_invoice_show_unknown(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "show", "INV-999999")

    assert result.exit_code == 1
    assert "Invoice 'INV-999999' not found" in result.output


def test_invoice_lifecycle(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)

    result = _invoke(cli_runner, temp_db, "send", "INV-000001")
    assert result.exit_code == 0
    assert "Invoice INV-000001 sent (pending payment)" in result.output

    result = _invoke(cli_runner, temp_db, "pay", "1")
    assert result.exit_code == 0
    assert "Invoice INV-000001 marked paid" in result.output

    result = _invoke(cli_runner, temp_db, "cancel", "INV-000001")
    assert result.exit_code == 1
    assert "cannot move from 'paid' to 'cancelled'" in result.output


def test_invoice_pay_draft_rejected(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    result = _invoke(cli_runner, temp_db, "pay", "INV-000001")

    assert result.exit_code == 1
    assert "cannot move from 'draft' to 'paid'" in result.output


def test_invoice_add_and_remove_job(cli_runner, temp_db, march_jobs, make_job):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    extra = make_job(date=date(2024, 4, 2), status="completed", duration_hours="1")

    result = _invoke(cli_runner, temp_db, "add-job", "INV-000001", str(extra.id))
    assert result.exit_code == 0
    assert f"Added job {extra.id} to INV-000001; total £200.00" in result.output

    result = _invoke(cli_runner, temp_db, "remove-job", "INV-000001", str(march_jobs[0].id))
    assert result.exit_code == 0
    assert "total £120.00" in result.output


def test_invoice_add_scheduled_job_rejected(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    result = _invoke(cli_runner, temp_db, "add-job", "INV-000001", str(march_jobs[2].id))

    assert result.exit_code == 1
    assert "only completed jobs can be invoiced" in result.output


def test_invoice_list(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    result = _invoke(cli_runner, temp_db, "list")

    assert result.exit_code == 0
    assert "INV-000001" in result.output
    assert "Jane Smith" in result.output
    assert "draft" in result.output


def test_invoice_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "list")

    assert result.exit_code == 0
    assert "No invoices found" in result.output


def test_invoice_delete_frees_jobs(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    result = _invoke(cli_runner, temp_db, "delete", "INV-000001", "--yes")

    assert result.exit_code == 0
    assert "Deleted invoice INV-000001" in result.output

    result = _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    assert "Created draft invoice INV-000002" in result.output
    assert "Jobs:   2" in result.output


def test_invoice_delete_sent_rejected(cli_runner, temp_db, march_jobs):
    _invoke(cli_runner, temp_db, "generate", "Jane Smith", *MARCH)
    _invoke(cli_runner, temp_db, "send", "INV-000001")
    result = _invoke(cli_runner, temp_db, "delete", "INV-000001", "--yes")

    assert result.exit_code == 1
    assert "only draft or cancelled invoices can be deleted" in result.output
    temp_db.disconnect()
    assert temp_db.get_invoice_by_number("INV-000001").status == InvoiceStatus.PENDING


def test_invoice_uninvoiced(cli_runner, temp_db, march_jobs):
    result = _invoke(cli_runner, temp_db, "uninvoiced", *MARCH)

    assert result.exit_code == 0
    assert "Clients with uninvoiced work between 2024-03-01 and 2024-03-31" in result.output
    assert "Jane Smith" in result.output

    result = _invoke(cli_runner, temp_db, "uninvoiced", "--client", "Jane Smith")
    assert result.exit_code == 0
    assert "Total: £160.00" in result.output
