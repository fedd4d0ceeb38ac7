"""Integration tests for end-to-end workflows."""

from settleup.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_full_workflow(cli_runner, temp_db):
    """Test complete workflow: group → members → expenses → balances → settle up."""
    # Step 1: Create group
    result = _invoke(cli_runner, temp_db, "group", "create", "Lisbon Trip", "--currency", "eur")
    assert result.exit_code == 0
    assert "Created group 'Lisbon Trip' (ID: 1, currency: EUR)" in result.output

    # Step 2: Add members
    result = _invoke(cli_runner, temp_db, "member", "add", "Lisbon Trip", "alice", "bob", "carol")
    assert result.exit_code == 0
    assert "Added 'carol' to group 'Lisbon Trip'" in result.output

    # Step 3: Log an equal expense
    result = _invoke(
        cli_runner, temp_db,
        "expense", "add", "Lisbon Trip",
        "--payer", "alice", "--amount", "90", "-d", "Dinner", "--date", "2024-05-02",
    )
    assert result.exit_code == 0
    assert "Created expense 1: Dinner" in result.output

    # Step 4: Log a percentage expense
    result = _invoke(
        cli_runner, temp_db,
        "expense", "add", "1",
        "--payer", "bob", "--amount", "100", "-d", "Hotel", "--split", "percentage",
        "--weight", "alice=50", "--weight", "bob=30%", "--weight", "carol=20",
    )
    assert result.exit_code == 0
    assert "50%" in result.output

    # Step 5: Balances
    result = _invoke(cli_runner, temp_db, "balances", "Lisbon Trip")
    assert result.exit_code == 0
    assert "Balances for Lisbon Trip (EUR)" in result.output
    assert "+10.00" in result.output
    assert "-50.00" in result.output

    # Step 6: Plan
    result = _invoke(cli_runner, temp_db, "settle-up", "Lisbon Trip")
    assert result.exit_code == 0
    assert "Suggested payments" in result.output
    assert "carol pays alice EUR 10.00" in result.output
    assert "carol pays bob EUR 40.00" in result.output
    assert "2 payments" in result.output

    # Step 7: Record the plan
    result = _invoke(cli_runner, temp_db, "settle-up", "Lisbon Trip", "--record")
    assert result.exit_code == 0
    assert "Recorded payments" in result.output

    result = _invoke(cli_runner, temp_db, "settlement", "list", "Lisbon Trip")
    assert result.exit_code == 0
    assert "carol -> bob" in result.output
    assert "settle-up" in result.output

    # Step 8: Everyone is settled
    result = _invoke(cli_runner, temp_db, "settle-up", "Lisbon Trip")
    assert result.exit_code == 0
    assert "Everyone in 'Lisbon Trip' is settled up." in result.output


def test_edit_and_delete_workflow(cli_runner, temp_db):
    """Test correcting and removing an expense."""
    _invoke(cli_runner, temp_db, "group", "create", "Flat")
    _invoke(cli_runner, temp_db, "member", "add", "Flat", "alice", "bob")
    _invoke(
        cli_runner, temp_db,
        "expense", "add", "Flat", "--payer", "alice", "--amount", "60", "-d", "Cleaning",
        "--split", "shares", "--weight", "alice=1", "--weight", "bob=2",
    )

    result = _invoke(cli_runner, temp_db, "expense", "edit", "1", "--amount", "90")
    assert result.exit_code == 0
    assert "Updated expense 1" in result.output
    assert "60.00" in result.output

    result = _invoke(cli_runner, temp_db, "expense", "show", "1")
    assert result.exit_code == 0
    assert "USD 90.00" in result.output
    assert "Split: shares" in result.output

    result = _invoke(cli_runner, temp_db, "expense", "delete", "1")
    assert result.exit_code == 0
    assert "Deleted expense 1" in result.output

    result = _invoke(cli_runner, temp_db, "expense", "list", "Flat")
    assert result.exit_code == 0
    assert "No expenses in group 'Flat'." in result.output
