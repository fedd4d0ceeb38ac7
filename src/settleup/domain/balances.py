"""Balance aggregation: fold a group's history into net positions.

Positive balance means the member is owed money, negative means they owe.
Every adjustment is paired (payer credit against split debits, settlement
sender against receiver), so balances of a group always add up to zero.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Optional

from settleup.domain.entities import Expense, MemberBalance, Participant, Settlement
from settleup.domain.errors import CurrencyMismatchError, SplitValidationError
from settleup.domain.allocation import SUM_TOLERANCE


def aggregate_balances(
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
    participants: Iterable[Participant] = (),
    currency: Optional[str] = None,
) -> dict[Participant, Decimal]:
    """Compute each participant's net signed balance.

    Args:
        expenses: Expenses with resolved splits
        settlements: Recorded settlements
        participants: Participants to include even without any activity
        currency: Currency the history must be in. Defaults to the currency
            of the first expense or settlement.

    Returns:
        Mapping participant -> net balance, in order of first appearance

    Raises:
        CurrencyMismatchError: If any item is in another currency
        SplitValidationError: If an expense's splits do not add up to its amount
    """
    rows = summarize_balances(expenses, settlements, participants, currency)
    return {row.participant: row.net for row in rows}


def summarize_balances(
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
    participants: Iterable[Participant] = (),
    currency: Optional[str] = None,
    display_names: Optional[Mapping[Participant, str]] = None,
) -> list[MemberBalance]:
    """Break each participant's balance down into paid, share, sent and received.

    Same inputs, validation and ordering as aggregate_balances; the net of
    each row equals the aggregated balance.
    """
    display_names = display_names or {}
    order: dict[Participant, None] = dict.fromkeys(participants)
    paid: defaultdict[Participant, Decimal] = defaultdict(Decimal)
    share: defaultdict[Participant, Decimal] = defaultdict(Decimal)
    sent: defaultdict[Participant, Decimal] = defaultdict(Decimal)
    received: defaultdict[Participant, Decimal] = defaultdict(Decimal)

    expenses = list(expenses)
    settlements = list(settlements)
    expected_currency = _reference_currency(currency, expenses, settlements)

    for expense in expenses:
        _check_currency(expected_currency, expense.currency, f"Expense {expense.id}")
        _check_reconciled(expense)
        order.setdefault(expense.payer)
        paid[expense.payer] += expense.amount
        for split in expense.splits:
            order.setdefault(split.participant)
            share[split.participant] += split.amount

    for settlement in settlements:
        _check_currency(expected_currency, settlement.currency, f"Settlement {settlement.id}")
        order.setdefault(settlement.from_participant)
        order.setdefault(settlement.to_participant)
        sent[settlement.from_participant] += settlement.amount
        received[settlement.to_participant] += settlement.amount

    return [
        MemberBalance(
            participant=participant,
            display_name=display_names.get(participant, participant),
            paid=paid[participant],
            share=share[participant],
            sent=sent[participant],
            received=received[participant],
        )
        for participant in order
    ]


def _reference_currency(
    currency: Optional[str], expenses: list[Expense], settlements: list[Settlement]
) -> Optional[str]:
    if currency is not None:
        return currency.upper()
    for item in (*expenses, *settlements):
        return item.currency.upper()
    return None


def _check_currency(expected: Optional[str], actual: str, source: str) -> None:
    if expected is not None and actual.upper() != expected:
        raise CurrencyMismatchError(expected=expected, actual=actual, source=source)


def _check_reconciled(expense: Expense) -> None:
    split_total = sum((split.amount for split in expense.splits), Decimal(0))
    if abs(split_total - expense.amount) > SUM_TOLERANCE:
        raise SplitValidationError(
            expense.split_rule.value,
            f"splits of expense {expense.id} do not add up to its amount",
            computed=split_total,
            expected=expense.amount,
        )
