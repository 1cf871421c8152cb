"""Tests for schedule and consolidate commands."""

from decimal import Decimal
from ledgerpilot.cli.main import cli


def _add_van(cli_runner, temp_db):
    return cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "schedule",
            "add-asset",
            "Delivery Van",
            "--cost",
            "60,000",
            "--life",
            "60",
            "--in-service",
            "2025-01-15",
        ],
    )


def _add_loan(cli_runner, temp_db):
    return cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "schedule",
            "add-liability",
            "Bank Loan",
            "--principal",
            "120000",
            "--rate",
            "6%",
            "--term",
            "24",
            "--start",
            "2025-01-01",
        ],
    )


def test_schedule_add_and_list(cli_runner, temp_db, sample_entity):
    """Test adding both kinds of schedule and listing them."""
    result = _add_van(cli_runner, temp_db)
    assert result.exit_code == 0
    assert "Added asset schedule 'Delivery Van'" in result.output

    result = _add_loan(cli_runner, temp_db)
    assert result.exit_code == 0
    assert "Added liability schedule 'Bank Loan'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "schedule", "list"])
    assert result.exit_code == 0
    assert "Delivery Van" in result.output
    assert "60 months from 2025-01-15" in result.output
    assert "6.00%" in result.output
    assert "24 months from 2025-01-01" in result.output


def test_schedule_list_empty(cli_runner, temp_db, sample_entity):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "schedule", "list"])

    assert result.exit_code == 0
    assert "No schedules found." in result.output


def test_schedule_add_asset_invalid(cli_runner, temp_db, sample_entity):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "schedule",
            "add-asset",
            "Van",
            "--cost",
            "100",
            "--life",
            "12",
            "--in-service",
            "2025-01-01",
            "--salvage",
            "500",
        ],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_schedule_add_liability_unknown_account(cli_runner, temp_db, sample_entity):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "schedule",
            "add-liability",
            "Loan",
            "--principal",
            "1000",
            "--rate",
            "0.05",
            "--term",
            "12",
            "--start",
            "2025-01-01",
            "--cash-account",
            "Treasury Bonds",
        ],
    )

    assert result.exit_code == 1
    assert "not found" in result.output


def test_schedule_preview(cli_runner, temp_db, sample_entity):
    _add_van(cli_runner, temp_db)
    _add_loan(cli_runner, temp_db)

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "schedule", "preview", "--period", "2025-02"]
    )

    assert result.exit_code == 0
    assert "Schedules of 'Main Entity' for 2025-02" in result.output
    assert "1,000.00" in result.output
    assert "principal 5,000.00 + interest 575.00 = 5,575.00" in result.output


def test_schedule_preview_before_start(cli_runner, temp_db, sample_entity):
    _add_van(cli_runner, temp_db)

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "schedule", "preview", "--period", "2024-12"]
    )

    assert result.exit_code == 0
    assert "Nothing scheduled for 2024-12." in result.output


def test_schedule_post_twice(cli_runner, temp_db, sample_entity):
    """Posting a month a second time adds nothing."""
    _add_van(cli_runner, temp_db)
    _add_loan(cli_runner, temp_db)

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "schedule", "post", "--period", "2025-02"]
    )
    assert result.exit_code == 0
    assert "Posted 2 scheduled entries." in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "schedule", "post", "--period", "2025-02"]
    )
    assert result.exit_code == 0
    assert "No pending scheduled entries for 2025-02." in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "journal", "list", "--period", "2025-02"]
    )
    assert "2 entries" in result.output
    assert "[SCHEDULED:depreciation:" in result.output
    assert "[SCHEDULED:loan:" in result.output


def test_schedule_delete(cli_runner, temp_db, sample_entity, schedule_service):
    _add_van(cli_runner, temp_db)
    asset = schedule_service.list_assets(sample_entity.id)[0]

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "schedule", "delete", asset.id[:8]],
        input="y\n",
    )

    assert result.exit_code == 0
    assert f"Deleted schedule {asset.id[:8]}" in result.output


def test_schedule_delete_not_found(cli_runner, temp_db, sample_entity):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "schedule", "delete", "deadbeef"]
    )

    assert result.exit_code == 1
    assert "Schedule 'deadbeef' not found" in result.output


def _intercompany_group(entity_service, account_service):
    parent = entity_service.create_entity("Parent Co")
    sub = entity_service.create_entity("Sub Co")
    ar = [a for a in account_service.list_accounts(parent.id) if a.name == "Intercompany Receivable"][0]
    ap = [a for a in account_service.list_accounts(sub.id) if a.name == "Intercompany Payable"][0]
    account_service.set_opening_balance(ar.id, Decimal("500"))
    account_service.set_opening_balance(ap.id, Decimal("-500"))
    return parent, sub


def test_consolidate(cli_runner, temp_db, entity_service, account_service):
    """Test intercompany balances are eliminated in the group view."""
    _intercompany_group(entity_service, account_service)

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "consolidate", "--group", "Parent Co"]
    )

    assert result.exit_code == 0
    assert "Included entities (2):" in result.output
    assert "Sub Co" in result.output
    assert "Consolidated balances of 'Parent Co' (all periods)" in result.output
    assert "Eliminations:" in result.output
    assert "Eliminate intercompany A/R vs A/P" in result.output
    assert "Closing totals: Dr 0.00 / Cr 0.00" in result.output


def test_consolidate_excludes_unconsolidated_entity(
    cli_runner, temp_db, entity_service, account_service
):
    _, sub = _intercompany_group(entity_service, account_service)
    entity_service.update_policy(sub.id, ownership_pct=Decimal("0"))

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "consolidate", "--group", "Parent Co"]
    )

    assert result.exit_code == 0
    assert "Included entities (1):" in result.output
    assert "No eliminations." in result.output
    assert "Closing totals: Dr 500.00 / Cr 0.00" in result.output


def test_consolidate_with_eliminations_disabled(
    cli_runner, temp_db, entity_service, account_service
):
    parent, _ = _intercompany_group(entity_service, account_service)
    entity_service.update_policy(parent.id, intercompany_enabled=False)

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "consolidate", "--group", "Parent Co"]
    )

    assert result.exit_code == 0
    assert "No eliminations." in result.output
    assert "Closing totals: Dr 500.00 / Cr 500.00" in result.output


def test_consolidate_invalid_period(cli_runner, temp_db, entity_service, account_service):
    _intercompany_group(entity_service, account_service)

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "consolidate", "--group", "Parent Co", "--period", "13/2025"],
    )

    assert result.exit_code == 1
    assert "Invalid period" in result.output


def test_consolidate_unknown_group(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "consolidate", "--group", "Nobody"]
    )

    assert result.exit_code == 1
    assert "not found" in result.output
