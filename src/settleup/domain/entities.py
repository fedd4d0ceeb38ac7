"""Domain model entities for settleup.

These are pure data classes representing business concepts, independent of
database schema. The allocation, aggregation and planning functions only ever
see these types, never ORM rows.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

# Member handle, unique within a group.
Participant = str


class SplitRule(str, Enum):
    """How an expense total is divided among its participants."""

    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"
    SHARES = "shares"


@dataclass(frozen=True)
class Group:
    """Expense-sharing group domain entity."""

    id: int
    name: str
    description: Optional[str]
    currency: str
    created_at: datetime


@dataclass(frozen=True)
class Member:
    """Group member domain entity."""

    id: int
    group_id: int
    handle: Participant
    display_name: str
    joined_at: datetime


@dataclass(frozen=True)
class Split:
    """One participant's owed share of an expense."""

    participant: Participant
    amount: Decimal
    weight: Optional[Decimal] = None
    expense_id: Optional[int] = None


@dataclass(frozen=True)
class Expense:
    """Expense domain entity with its resolved splits."""

    id: int
    group_id: int
    description: str
    amount: Decimal
    payer: Participant
    currency: str
    split_rule: SplitRule
    splits: tuple[Split, ...]
    expense_date: date
    category: Optional[str]
    created_at: datetime

    @property
    def participants(self) -> tuple[Participant, ...]:
        return tuple(split.participant for split in self.splits)


@dataclass(frozen=True)
class Settlement:
    """A recorded repayment between two members."""

    id: int
    group_id: int
    from_participant: Participant
    to_participant: Participant
    amount: Decimal
    currency: str
    settled_at: date
    idempotency_key: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class Transfer:
    """A proposed repayment that has not been recorded yet."""

    from_participant: Participant
    to_participant: Participant
    amount: Decimal


@dataclass(frozen=True)
class MemberBalance:
    """Per-member breakdown of a group's net position.

    net = paid - share + sent - received
    """

    participant: Participant
    display_name: str
    paid: Decimal
    share: Decimal
    sent: Decimal
    received: Decimal

    @property
    def net(self) -> Decimal:
        return self.paid - self.share + self.sent - self.received
