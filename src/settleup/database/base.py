"""Abstract database interface.

This is the boundary the domain services read a group's history through and
record accepted transfers through. Reads for one group and currency must
come from a consistent snapshot; writes of an expense with its splits, or of
a settlement, must be atomic.
"""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from settleup.domain.entities import (
    Expense,
    Group,
    Member,
    Settlement,
    Split,
    SplitRule,
)


class Database(ABC):
    """Abstract database interface for settleup."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Group operations
    @abstractmethod
    def create_group(self, name: str, currency: str, description: Optional[str] = None) -> int:
        """Create a new group. Returns group ID."""
        pass

    @abstractmethod
    def get_group(self, group_id: int) -> Optional[Group]:
        """Get group by ID."""
        pass

    @abstractmethod
    def get_group_by_name(self, name: str) -> Optional[Group]:
        """Get group by name."""
        pass

    @abstractmethod
    def list_groups(self) -> list[Group]:
        """List all groups."""
        pass

    # Member operations
    @abstractmethod
    def add_member(self, group_id: int, handle: str, display_name: str) -> int:
        """Add a member to a group. Returns member ID."""
        pass

    @abstractmethod
    def get_member(self, group_id: int, handle: str) -> Optional[Member]:
        """Get a group member by handle."""
        pass

    @abstractmethod
    def list_members(self, group_id: int) -> list[Member]:
        """List members of a group in join order."""
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        group_id: int,
        description: str,
        amount: Decimal,
        payer: str,
        currency: str,
        split_rule: SplitRule,
        splits: tuple[Split, ...],
        expense_date: date,
        category: Optional[str] = None,
    ) -> int:
        """Create an expense together with its splits. Returns expense ID."""
        pass

    @abstractmethod
    def replace_expense(
        self,
        expense_id: int,
        description: str,
        amount: Decimal,
        payer: str,
        currency: str,
        split_rule: SplitRule,
        splits: tuple[Split, ...],
        expense_date: date,
        category: Optional[str] = None,
    ) -> None:
        """Replace an expense and all of its splits in one write."""
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense and its splits."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID, with splits."""
        pass

    @abstractmethod
    def list_expenses(self, group_id: int, currency: Optional[str] = None) -> list[Expense]:
        """List a group's expenses with splits, optionally for one currency.

        Ordered by expense date, then ID.
        """
        pass

    # Settlement operations
    @abstractmethod
    def create_settlement(
        self,
        group_id: int,
        from_participant: str,
        to_participant: str,
        amount: Decimal,
        currency: str,
        settled_at: date,
        idempotency_key: Optional[str] = None,
        note: Optional[str] = None,
    ) -> int:
        """Record a settlement. Returns settlement ID.

        Raises:
            ConflictError: If idempotency_key was already used in the group
        """
        pass

    @abstractmethod
    def get_settlement(self, settlement_id: int) -> Optional[Settlement]:
        """Get settlement by ID."""
        pass

    @abstractmethod
    def list_settlements(self, group_id: int, currency: Optional[str] = None) -> list[Settlement]:
        """List a group's settlements, optionally for one currency.

        Ordered by settlement date, then ID.
        """
        pass

    @abstractmethod
    def load_history(
        self, group_id: int, currency: str
    ) -> tuple[list[Member], list[Expense], list[Settlement]]:
        """Read a group's members, expenses and settlements for one currency.

        All three lists come from the same read transaction.
        """
        pass
