"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class SplitValidationError(ValidationError):
    """A split configuration that cannot be allocated.

    Carries the failing rule and, where a sum is involved, the computed and
    expected sums so the caller can show the user what to correct.
    """

    def __init__(
        self,
        rule: str,
        message: str,
        computed: Optional[Decimal] = None,
        expected: Optional[Decimal] = None,
    ):
        self.rule = rule
        self.computed = computed
        self.expected = expected
        if computed is not None and expected is not None:
            message = f"{message} (got {computed}, expected {expected})"
        super().__init__(f"Invalid '{rule}' split: {message}")


class CurrencyMismatchError(ValidationError):
    """Expenses or settlements in different currencies were mixed."""

    def __init__(self, expected: str, actual: str, source: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{source} is in {actual}, but balances are being computed in {expected}"
        )


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def group_not_found(group: str | int) -> str:
    """Return message for missing group."""
    if isinstance(group, int):
        return f"Group {group} not found"
    return f"Group '{group}' not found"


def member_not_found(handle: str, group_name: str) -> str:
    """Return message for a handle that is not a member of the group."""
    return f"'{handle}' is not a member of group '{group_name}'"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def duplicate_settlement_key(key: str, group_id: int) -> str:
    """Return message when a settlement idempotency key was already used."""
    return f"Settlement with key '{key}' was already recorded for group {group_id}"
