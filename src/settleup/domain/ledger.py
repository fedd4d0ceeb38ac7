"""Ledger domain service: balances, settle-up plans and recorded repayments.

Balances are recomputed from the group's full history on every call and are
never stored, so a cached figure can never drift from the ledger.
"""

import hashlib
import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Optional

from settleup.database.base import Database
from settleup.domain.balances import aggregate_balances, summarize_balances
from settleup.domain.entities import (
    Expense as ExpenseEntity,
    Group as GroupEntity,
    MemberBalance,
    Settlement as SettlementEntity,
    Transfer,
)
from settleup.domain.errors import ValidationError
from settleup.domain.group import GroupService, normalize_currency
from settleup.domain.settlement import DEFAULT_EPSILON, apply_transfers, plan_settlements
from settleup.utils.amount_parser import CENT, round_cents, to_decimal

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for computing balances and settling up a group."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db
        self.group_service = GroupService(db)

    def get_balances(self, group_id: int, currency: Optional[str] = None) -> dict[str, Decimal]:
        """Compute every member's net balance in one currency.

        Args:
            group_id: Group ID
            currency: Currency code (defaults to the group's currency)

        Returns:
            Mapping member handle -> net balance (positive = is owed money)
        """
        group, code = self._group_and_currency(group_id, currency)
        members, expenses, settlements = self.db.load_history(group.id, code)
        return aggregate_balances(
            expenses, settlements, [m.handle for m in members], currency=code
        )

    def balance_report(self, group_id: int, currency: Optional[str] = None) -> list[MemberBalance]:
        """Break every member's balance down into paid, share, sent and received."""
        group, code = self._group_and_currency(group_id, currency)
        members, expenses, settlements = self.db.load_history(group.id, code)
        return summarize_balances(
            expenses,
            settlements,
            [m.handle for m in members],
            currency=code,
            display_names={m.handle: m.display_name for m in members},
        )

    def plan(
        self,
        group_id: int,
        currency: Optional[str] = None,
        epsilon: Decimal = DEFAULT_EPSILON,
    ) -> list[Transfer]:
        """Plan the transfers that settle the group up in one currency."""
        balances = self.get_balances(group_id, currency)
        transfers = plan_settlements(balances, epsilon)
        logger.debug("Group %s needs %d transfer(s) to settle up", group_id, len(transfers))
        residue = max(
            (abs(v) for v in apply_transfers(balances, transfers).values()), default=Decimal(0)
        )
        if residue > to_decimal(epsilon):
            logger.warning(
                "Plan for group %s leaves a balance of %s unsettled (epsilon %s)",
                group_id, residue, epsilon,
            )
        return transfers

    def record_settlement(
        self,
        group_id: int,
        from_participant: str,
        to_participant: str,
        amount: Decimal,
        currency: Optional[str] = None,
        settled_at: Optional[date] = None,
        idempotency_key: Optional[str] = None,
        note: Optional[str] = None,
    ) -> int:
        """Record a repayment between two members.

        Args:
            group_id: Group ID
            from_participant: Handle of the member paying
            to_participant: Handle of the member receiving
            amount: Amount paid, rounded to whole cents
            currency: Currency code (defaults to the group's currency)
            settled_at: Date of the payment (defaults to today)
            idempotency_key: Optional key; recording the same key twice in a
                group raises ConflictError and writes nothing
            note: Optional note

        Returns:
            Settlement ID

        Raises:
            NotFoundError: If the group or either member is unknown
            ValidationError: If the amount is not positive or both sides match
            ConflictError: If the idempotency key was already used
        """
        group, code = self._group_and_currency(group_id, currency)
        amount = round_cents(to_decimal(amount))
        if amount < CENT:
            raise ValidationError(f"Settlement amount must be positive, got {amount}")
        if from_participant == to_participant:
            raise ValidationError(f"'{from_participant}' cannot settle with themselves")
        self.group_service.require_members(group, [from_participant, to_participant])

        settlement_id = self.db.create_settlement(
            group_id=group.id,
            from_participant=from_participant,
            to_participant=to_participant,
            amount=amount,
            currency=code,
            settled_at=settled_at or date.today(),
            idempotency_key=idempotency_key,
            note=note,
        )
        logger.info(
            "Recorded settlement %s in group %s: %s -> %s %s %s",
            settlement_id, group.id, from_participant, to_participant, amount, code,
        )
        return settlement_id

    def record_transfer(
        self,
        group_id: int,
        transfer: Transfer,
        currency: Optional[str] = None,
        settled_at: Optional[date] = None,
        idempotency_key: Optional[str] = None,
    ) -> int:
        """Record an accepted planned transfer as a settlement."""
        return self.record_settlement(
            group_id=group_id,
            from_participant=transfer.from_participant,
            to_participant=transfer.to_participant,
            amount=transfer.amount,
            currency=currency,
            settled_at=settled_at,
            idempotency_key=idempotency_key,
            note="settle-up",
        )

    def settle_up(
        self,
        group_id: int,
        currency: Optional[str] = None,
        epsilon: Decimal = DEFAULT_EPSILON,
        settled_at: Optional[date] = None,
    ) -> list[tuple[Transfer, int]]:
        """Plan the group's transfers and record each one as a settlement.

        Each transfer gets an idempotency key derived from the ledger history
        it was planned from and its position in the plan. Running this twice
        against the same history records nothing the second time, while a
        later cycle that happens to reach the same balances gets new keys.

        Returns:
            (transfer, settlement ID) pairs in plan order
        """
        group, code = self._group_and_currency(group_id, currency)
        members, expenses, settlements = self.db.load_history(group.id, code)
        balances = aggregate_balances(
            expenses, settlements, [m.handle for m in members], currency=code
        )
        transfers = plan_settlements(balances, epsilon)
        snapshot = snapshot_digest(group.id, code, expenses, settlements)

        recorded = []
        for position, transfer in enumerate(transfers, start=1):
            settlement_id = self.record_transfer(
                group.id,
                transfer,
                currency=code,
                settled_at=settled_at,
                idempotency_key=f"plan-{snapshot}-{position}",
            )
            recorded.append((transfer, settlement_id))
        return recorded

    def list_settlements(
        self, group_id: int, currency: Optional[str] = None
    ) -> list[SettlementEntity]:
        """List a group's settlements, optionally for one currency."""
        group = self.group_service.resolve_group(group_id)
        return self.db.list_settlements(
            group.id, normalize_currency(currency) if currency else None
        )

    def _group_and_currency(
        self, group_id: int, currency: Optional[str]
    ) -> tuple[GroupEntity, str]:
        group = self.group_service.resolve_group(group_id)
        return group, normalize_currency(currency or group.currency)


def snapshot_digest(
    group_id: int,
    currency: str,
    expenses: Iterable[ExpenseEntity],
    settlements: Iterable[SettlementEntity],
) -> str:
    """Return a short stable digest of a group's history in one currency.

    Covers every expense with its splits and every settlement, so any write to
    the ledger changes the digest even when balances come out the same.
    """
    lines = [f"group {group_id} {currency}"]
    for e in sorted(expenses, key=lambda e: e.id):
        splits = ",".join(f"{s.participant}={s.amount.normalize()}" for s in e.splits)
        lines.append(f"expense {e.id} {e.payer} {e.amount.normalize()} {splits}")
    for s in sorted(settlements, key=lambda s: s.id):
        lines.append(
            f"settlement {s.id} {s.from_participant} {s.to_participant} {s.amount.normalize()}"
        )
    return hashlib.sha256("\n".join(lines).encode("utf-8")).hexdigest()[:16]
