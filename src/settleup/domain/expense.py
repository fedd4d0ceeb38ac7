"""Expense domain service."""

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal
from typing import Optional

from settleup.database.base import Database
from settleup.domain.allocation import allocate_split, parse_split_rule
from settleup.domain.entities import Expense as ExpenseEntity, SplitRule
from settleup.domain.errors import NotFoundError, ValidationError, expense_not_found
from settleup.domain.group import GroupService, normalize_currency
from settleup.utils.amount_parser import to_decimal

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for logging, editing and removing shared expenses."""

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db
        self.group_service = GroupService(db)

    def add_expense(
        self,
        group_id: int,
        description: str,
        amount: Decimal,
        payer: str,
        split_rule: SplitRule | str = SplitRule.EQUAL,
        participants: Optional[Sequence[str]] = None,
        weights: Optional[Mapping[str, Decimal]] = None,
        expense_date: Optional[date] = None,
        category: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> int:
        """Log an expense and allocate its splits.

        Args:
            group_id: Group ID
            description: What the money was spent on
            amount: Expense total
            payer: Handle of the member who paid
            split_rule: How the total is divided
            participants: Handles sharing the cost. Defaults to the keys of
                weights when given, otherwise every group member.
            weights: Per-participant weights for non-equal rules
            expense_date: Date of the expense (defaults to today)
            category: Optional category label
            currency: Currency code (defaults to the group's currency)

        Returns:
            Expense ID

        Raises:
            NotFoundError: If the group, payer or a participant is unknown
            ValidationError: If the split configuration is invalid
        """
        group = self.group_service.resolve_group(group_id)
        rule = parse_split_rule(split_rule)
        description = self._require_description(description)
        participants = self._resolve_participants(group, participants, weights)
        self.group_service.require_members(group, [payer, *participants])

        splits = allocate_split(amount, rule, participants, weights)
        expense_id = self.db.create_expense(
            group_id=group.id,
            description=description,
            amount=to_decimal(amount),
            payer=payer,
            currency=normalize_currency(currency or group.currency),
            split_rule=rule,
            splits=splits,
            expense_date=expense_date or date.today(),
            category=category,
        )
        logger.info(
            "Recorded expense %s in group %s: %s split %s ways (%s)",
            expense_id, group.id, amount, len(splits), rule.value,
        )
        return expense_id

    def edit_expense(
        self,
        expense_id: int,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        payer: Optional[str] = None,
        split_rule: Optional[SplitRule | str] = None,
        participants: Optional[Sequence[str]] = None,
        weights: Optional[Mapping[str, Decimal]] = None,
        expense_date: Optional[date] = None,
        category: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> None:
        """Edit an expense by replacing it and all of its splits.

        Fields left as None keep their current value. When neither the rule,
        the participants nor the weights change, the stored weights are
        reused so percentage and share splits follow a new amount. Exact
        splits store amounts as weights, so changing the amount of an exact
        split needs new weights.

        Raises:
            NotFoundError: If the expense or a referenced member is unknown
            ValidationError: If the new split configuration is invalid, or the
                amount of an exact split changes without new weights
        """
        current = self.require_expense(expense_id)
        group = self.group_service.resolve_group(current.group_id)

        rule = parse_split_rule(split_rule) if split_rule is not None else current.split_rule
        if (
            rule == SplitRule.EXACT
            and weights is None
            and amount is not None
            and to_decimal(amount) != current.amount
        ):
            raise ValidationError(
                f"Expense {expense_id} is split by exact amounts; "
                "give new amounts with the weights when changing its total"
            )
        if weights is None and participants is None and rule == current.split_rule:
            participants = list(current.participants)
            if rule != SplitRule.EQUAL:
                weights = {split.participant: split.weight for split in current.splits}
        elif participants is None and weights is None:
            participants = list(current.participants)
        participants = self._resolve_participants(group, participants, weights)

        payer = payer or current.payer
        self.group_service.require_members(group, [payer, *participants])
        amount = current.amount if amount is None else to_decimal(amount)

        splits = allocate_split(amount, rule, participants, weights, expense_id=expense_id)
        self.db.replace_expense(
            expense_id=expense_id,
            description=self._require_description(
                current.description if description is None else description
            ),
            amount=amount,
            payer=payer,
            currency=normalize_currency(currency or current.currency),
            split_rule=rule,
            splits=splits,
            expense_date=expense_date or current.expense_date,
            category=current.category if category is None else (category or None),
        )
        logger.info("Replaced expense %s (%s, %s)", expense_id, amount, rule.value)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense and its splits.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        self.require_expense(expense_id)
        self.db.delete_expense(expense_id)
        logger.info("Deleted expense %s", expense_id)

    def get_expense(self, expense_id: int) -> Optional[ExpenseEntity]:
        """Get expense by ID.

        Args:
            expense_id: Expense ID

        Returns:
            Expense entity or None if not found
        """
        return self.db.get_expense(expense_id)

    def require_expense(self, expense_id: int) -> ExpenseEntity:
        """Get expense by ID or raise NotFoundError."""
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return expense

    def list_expenses(self, group_id: int, currency: Optional[str] = None) -> list[ExpenseEntity]:
        """List a group's expenses, optionally for one currency."""
        group = self.group_service.resolve_group(group_id)
        return self.db.list_expenses(
            group.id, normalize_currency(currency) if currency else None
        )

    def _resolve_participants(self, group, participants, weights) -> list[str]:
        if participants:
            return list(participants)
        if weights:
            return list(weights)
        members = [member.handle for member in self.db.list_members(group.id)]
        if not members:
            raise ValidationError(f"Group '{group.name}' has no members to split with")
        return members

    @staticmethod
    def _require_description(description: str) -> str:
        description = (description or "").strip()
        if not description:
            raise ValidationError("Expense description must not be empty")
        return description
