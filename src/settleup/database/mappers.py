"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the allocation, aggregation and
planning code never sees ORM rows.
"""

from decimal import Decimal
from typing import Optional

from settleup.domain import entities as domain
from settleup.database.models import (
    Group as ORMGroup,
    Member as ORMMember,
    Expense as ORMExpense,
    ExpenseSplit as ORMExpenseSplit,
    Settlement as ORMSettlement,
)


def _decimal(value) -> Optional[Decimal]:
    # SQLite hands back Numeric columns as Decimal already, other drivers may not
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def group_to_domain(orm_group: ORMGroup) -> domain.Group:
    """Convert SQLAlchemy Group model to domain Group entity."""
    return domain.Group(
        id=orm_group.id,
        name=orm_group.name,
        description=orm_group.description,
        currency=orm_group.currency,
        created_at=orm_group.created_at,
    )


def member_to_domain(orm_member: ORMMember) -> domain.Member:
    """Convert SQLAlchemy Member model to domain Member entity."""
    return domain.Member(
        id=orm_member.id,
        group_id=orm_member.group_id,
        handle=orm_member.handle,
        display_name=orm_member.display_name,
        joined_at=orm_member.joined_at,
    )


def split_to_domain(orm_split: ORMExpenseSplit) -> domain.Split:
    """Convert SQLAlchemy ExpenseSplit model to domain Split entity."""
    return domain.Split(
        participant=orm_split.participant,
        amount=_decimal(orm_split.amount),
        weight=_decimal(orm_split.weight),
        expense_id=orm_split.expense_id,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model (with splits) to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        group_id=orm_expense.group_id,
        description=orm_expense.description,
        amount=_decimal(orm_expense.amount),
        payer=orm_expense.payer,
        currency=orm_expense.currency,
        split_rule=domain.SplitRule(orm_expense.split_rule),
        splits=tuple(split_to_domain(s) for s in orm_expense.splits),
        expense_date=orm_expense.expense_date,
        category=orm_expense.category,
        created_at=orm_expense.created_at,
    )


def settlement_to_domain(orm_settlement: ORMSettlement) -> domain.Settlement:
    """Convert SQLAlchemy Settlement model to domain Settlement entity."""
    return domain.Settlement(
        id=orm_settlement.id,
        group_id=orm_settlement.group_id,
        from_participant=orm_settlement.from_participant,
        to_participant=orm_settlement.to_participant,
        amount=_decimal(orm_settlement.amount),
        currency=orm_settlement.currency,
        settled_at=orm_settlement.settled_at,
        idempotency_key=orm_settlement.idempotency_key,
        note=orm_settlement.note,
    )


def splits_to_orm(splits: tuple[domain.Split, ...]) -> list[ORMExpenseSplit]:
    """Build ORM split rows from domain splits, keeping their order."""
    return [
        ORMExpenseSplit(
            participant=split.participant,
            position=position,
            amount=split.amount,
            weight=split.weight,
        )
        for position, split in enumerate(splits)
    ]
