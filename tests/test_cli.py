"""Tests for CLI commands and error reporting."""

import pytest

from settleup.cli.main import cli


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def _invoke(*args):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])

    return _invoke


@pytest.fixture
def trip(invoke):
    """Create group 'Trip' with alice, bob and carol."""
    invoke("group", "create", "Trip")
    invoke("member", "add", "Trip", "alice", "bob", "carol")
    return "Trip"


def test_help_does_not_need_database(cli_runner):
    """Test that --help works without opening a database."""
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "settle" in result.output.lower()


def test_group_list_empty(invoke):
    """Test listing groups when none exist."""
    result = invoke("group", "list")
    assert result.exit_code == 0
    assert "No groups found." in result.output


def test_group_list(invoke, trip):
    """Test listing groups with member counts."""
    result = invoke("group", "list")
    assert result.exit_code == 0
    assert "Trip" in result.output
    assert "3 members" in result.output


def test_duplicate_group(invoke, trip):
    """Test creating a group twice."""
    result = invoke("group", "create", "Trip")
    assert result.exit_code == 1
    assert "Error: Group with name 'Trip' already exists" in result.output


def test_unknown_group(invoke):
    """Test referring to a missing group."""
    result = invoke("balances", "Nowhere")
    assert result.exit_code == 1
    assert "Error: Group 'Nowhere' not found" in result.output


def test_member_list(invoke, trip):
    """Test listing members."""
    invoke("member", "add", "Trip", "dave", "--name", "Dave Smith")
    result = invoke("member", "list", "Trip")
    assert result.exit_code == 0
    assert "Dave Smith" in result.output


def test_member_name_with_several_handles(invoke, trip):
    """Test that --name needs a single handle."""
    result = invoke("member", "add", "Trip", "dave", "erin", "--name", "D")
    assert result.exit_code == 1
    assert "--name can only be used" in result.output


def test_percentage_split_not_adding_up(invoke, trip):
    """Test that a bad percentage split is reported with the sums."""
    result = invoke(
        "expense", "add", "Trip", "--payer", "alice", "--amount", "100", "-d", "Hotel",
        "--split", "percentage", "--weight", "alice=60", "--weight", "bob=30", "--weight", "carol=5",
    )
    assert result.exit_code == 1
    assert "percentages must add up to 100 (got 95, expected 100)" in result.output

    result = invoke("expense", "list", "Trip")
    assert "No expenses" in result.output


def test_malformed_weight(invoke, trip):
    """Test a weight option without '='."""
    result = invoke(
        "expense", "add", "Trip", "--payer", "alice", "--amount", "10", "-d", "Taxi",
        "--split", "shares", "--weight", "alice",
    )
    assert result.exit_code == 1
    assert "expected PARTICIPANT=VALUE" in result.output


def test_invalid_amount(invoke, trip):
    """Test an amount that is not a number."""
    result = invoke("expense", "add", "Trip", "--payer", "alice", "--amount", "ten", "-d", "Taxi")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_unknown_payer(invoke, trip):
    """Test that the payer must be a member."""
    result = invoke("expense", "add", "Trip", "--payer", "zed", "--amount", "10", "-d", "Taxi")
    assert result.exit_code == 1
    assert "'zed' is not a member of group 'Trip'" in result.output


def test_expense_with_subset(invoke, trip):
    """Test an equal split among some members."""
    result = invoke(
        "expense", "add", "Trip", "--payer", "alice", "--amount", "10", "-d", "Taxi",
        "--with", "alice", "--with", "bob", "--category", "Transport",
    )
    assert result.exit_code == 0
    assert "carol" not in result.output

    result = invoke("expense", "show", "1")
    assert "Category: Transport" in result.output


def test_show_missing_expense(invoke):
    """Test showing an expense that does not exist."""
    result = invoke("expense", "show", "9")
    assert result.exit_code == 1
    assert "Error: Expense 9 not found" in result.output


def test_settlement_add_and_duplicate_key(invoke, trip):
    """Test recording a settlement and repeating its key."""
    args = ("settlement", "add", "Trip", "--from", "bob", "--to", "alice", "--amount", "30", "--key", "ref-1")
    result = invoke(*args)
    assert result.exit_code == 0
    assert "Recorded settlement 1: bob paid alice USD 30.00" in result.output

    result = invoke(*args)
    assert result.exit_code == 1
    assert "ref-1" in result.output


def test_settlement_with_self(invoke, trip):
    """Test that members cannot settle with themselves."""
    result = invoke("settlement", "add", "Trip", "--from", "bob", "--to", "bob", "--amount", "5")
    assert result.exit_code == 1
    assert "themselves" in result.output


def test_settlement_list_empty(invoke, trip):
    """Test listing settlements when none exist."""
    result = invoke("settlement", "list", "Trip")
    assert result.exit_code == 0
    assert "No settlements in group 'Trip'." in result.output


def test_balances_empty_group(invoke):
    """Test balances of a group with no members."""
    invoke("group", "create", "Empty")
    result = invoke("balances", "Empty")
    assert result.exit_code == 0
    assert "No balances yet." in result.output


def test_settle_up_invalid_epsilon(invoke, trip):
    """Test that a non-positive epsilon is rejected."""
    result = invoke("settle-up", "Trip", "--epsilon", "0")
    assert result.exit_code == 1
    assert "Epsilon must be positive" in result.output


def test_settle_up_single_payment(invoke, trip):
    """Test the singular payment summary."""
    invoke("expense", "add", "Trip", "--payer", "alice", "--amount", "20", "-d", "Taxi", "--with", "bob")
    result = invoke("settle-up", "Trip")
    assert result.exit_code == 0
    assert "bob pays alice USD 20.00" in result.output
    assert "1 payment\n" in result.output


def test_db_path_from_environment(cli_runner, temp_db):
    """Test that SETTLEUP_DB_PATH selects the database."""
    result = cli_runner.invoke(
        cli, ["group", "create", "Env"], env={"SETTLEUP_DB_PATH": temp_db.database_path}
    )
    assert result.exit_code == 0
    assert temp_db.get_group_by_name("Env") is not None


def test_default_currency_from_environment(cli_runner, temp_db):
    """Test that SETTLEUP_DEFAULT_CURRENCY sets the group currency."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "group", "create", "Kyoto"],
        env={"SETTLEUP_DEFAULT_CURRENCY": "JPY"},
    )
    assert result.exit_code == 0
    assert "currency: JPY" in result.output
