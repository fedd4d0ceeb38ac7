"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from settleup.database.models import (
    Group as ORMGroup,
    Member as ORMMember,
    Expense as ORMExpense,
    ExpenseSplit as ORMExpenseSplit,
    Settlement as ORMSettlement,
)
from settleup.database.mappers import (
    group_to_domain,
    member_to_domain,
    expense_to_domain,
    settlement_to_domain,
    splits_to_orm,
)
from settleup.domain.entities import Expense, Group, Member, Settlement, Split, SplitRule


class TestGroupMapper:
    """Tests for Group and Member mappers."""

    def test_group_to_domain(self):
        """Test converting ORM Group to domain Group."""
        orm_group = ORMGroup(
            id=1,
            name="Lisbon Trip",
            description="Spring break",
            currency="EUR",
            created_at=datetime.now(UTC),
        )
        group = group_to_domain(orm_group)

        assert isinstance(group, Group)
        assert group.name == "Lisbon Trip"
        assert group.currency == "EUR"
        assert group.created_at == orm_group.created_at

    def test_member_to_domain(self):
        """Test converting ORM Member to domain Member."""
        orm_member = ORMMember(
            id=3, group_id=1, handle="bob", display_name="Bob", joined_at=datetime.now(UTC)
        )
        member = member_to_domain(orm_member)

        assert isinstance(member, Member)
        assert member.handle == "bob"
        assert member.display_name == "Bob"


class TestExpenseMapper:
    """Tests for Expense mapper."""

    def test_expense_to_domain_with_splits(self):
        """Test converting ORM Expense with its split rows."""
        orm_expense = ORMExpense(
            id=5,
            group_id=1,
            description="Groceries",
            amount=Decimal("60.00"),
            payer="alice",
            currency="USD",
            split_rule="shares",
            category="Food",
            expense_date=date(2024, 1, 15),
            created_at=datetime.now(UTC),
        )
        orm_expense.splits = [
            ORMExpenseSplit(expense_id=5, participant="alice", position=0, amount=Decimal("40.00"), weight=Decimal("2")),
            ORMExpenseSplit(expense_id=5, participant="bob", position=1, amount=Decimal("20.00"), weight=Decimal("1")),
        ]
        expense = expense_to_domain(orm_expense)

        assert isinstance(expense, Expense)
        assert expense.split_rule is SplitRule.SHARES
        assert expense.splits == (
            Split("alice", Decimal("40.00"), Decimal("2"), 5),
            Split("bob", Decimal("20.00"), Decimal("1"), 5),
        )
        assert expense.category == "Food"

    def test_float_amounts_become_decimal(self):
        """Test that non-Decimal numerics are converted."""
        orm_expense = ORMExpense(
            id=6,
            group_id=1,
            description="Taxi",
            amount=12.5,
            payer="bob",
            currency="USD",
            split_rule="equal",
            expense_date=date(2024, 1, 16),
            created_at=datetime.now(UTC),
        )
        orm_expense.splits = [
            ORMExpenseSplit(expense_id=6, participant="bob", position=0, amount=12.5, weight=None),
        ]
        expense = expense_to_domain(orm_expense)

        assert expense.amount == Decimal("12.5")
        assert isinstance(expense.splits[0].amount, Decimal)
        assert expense.splits[0].weight is None

    def test_splits_to_orm_keeps_order(self):
        """Test that split rows record their position."""
        rows = splits_to_orm((Split("carol", Decimal("5")), Split("alice", Decimal("5"))))
        assert [(r.participant, r.position) for r in rows] == [("carol", 0), ("alice", 1)]


class TestSettlementMapper:
    """Tests for Settlement mapper."""

    def test_settlement_to_domain(self):
        """Test converting ORM Settlement to domain Settlement."""
        orm_settlement = ORMSettlement(
            id=2,
            group_id=1,
            from_participant="bob",
            to_participant="alice",
            amount=Decimal("30.00"),
            currency="USD",
            settled_at=date(2024, 1, 20),
            idempotency_key="venmo-123",
            note=None,
        )
        settlement = settlement_to_domain(orm_settlement)

        assert isinstance(settlement, Settlement)
        assert settlement.from_participant == "bob"
        assert settlement.amount == Decimal("30.00")
        assert settlement.idempotency_key == "venmo-123"
