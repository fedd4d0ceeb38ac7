"""Settlement planning: turn net balances into a short list of transfers.

Greedy matching on net balances. The largest remaining debtor pays the
largest remaining creditor the smaller of the two amounts; whoever reaches
zero drops out and the other goes back into the queue. Balances within
epsilon of zero never start a transfer on their own, but they are kept aside
and used to pay off (or be paid by) anyone still above epsilon once the
main pass runs dry, so cent-level residue cannot leave a creditor unpaid.

Each transfer zeroes at least one participant, so n participants with a
nonzero balance need at most n - 1 transfers. Ties are broken by ascending
participant so identical input always yields identical output.

The plan works on net positions only; it does not preserve who originally
owed whom, and a debtor may end up paying someone they never shared an
expense with.
"""

import heapq
import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from settleup.domain.entities import Participant, Transfer
from settleup.domain.errors import ValidationError
from settleup.utils.amount_parser import to_decimal

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = Decimal("0.01")

Amount = Decimal | int | float | str

# Max-heap entry: (-magnitude, participant)
_Entry = tuple[Decimal, Participant]


def plan_settlements(
    balances: Mapping[Participant, Amount],
    epsilon: Amount = DEFAULT_EPSILON,
) -> list[Transfer]:
    """Plan transfers that bring every balance to within epsilon of zero.

    Args:
        balances: Participant -> net balance (positive = is owed money)
        epsilon: Balances within epsilon of zero count as settled

    Returns:
        Ordered list of transfers, empty if everyone is already settled

    Raises:
        ValidationError: If epsilon is not positive or a balance is not a number
    """
    try:
        epsilon = to_decimal(epsilon)
    except ValueError as e:
        raise ValidationError(f"Invalid epsilon: {e}")
    if epsilon <= 0:
        raise ValidationError(f"Epsilon must be positive, got {epsilon}")

    creditors: list[_Entry] = []
    debtors: list[_Entry] = []
    small_creditors: list[_Entry] = []
    small_debtors: list[_Entry] = []
    net_total = Decimal(0)
    for participant, value in balances.items():
        try:
            balance = to_decimal(value)
        except ValueError as e:
            raise ValidationError(f"Invalid balance for '{participant}': {e}")
        net_total += balance
        if balance > 0:
            _push(creditors if balance > epsilon else small_creditors, balance, participant)
        elif balance < 0:
            _push(debtors if balance < -epsilon else small_debtors, -balance, participant)

    if abs(net_total) > epsilon:
        logger.warning(
            "Balances do not sum to zero (off by %s); the plan cannot settle everyone",
            net_total,
        )

    transfers: list[Transfer] = []
    while creditors and debtors:
        credit, creditor = _pop(creditors)
        debt, debtor = _pop(debtors)
        amount = min(credit, debt)
        transfers.append(Transfer(from_participant=debtor, to_participant=creditor, amount=amount))
        _requeue(creditors, small_creditors, credit - amount, creditor, epsilon)
        _requeue(debtors, small_debtors, debt - amount, debtor, epsilon)

    # At most one side is left; settle it against the residue on the other
    while creditors and small_debtors:
        credit, creditor = _pop(creditors)
        debt, debtor = _pop(small_debtors)
        amount = min(credit, debt)
        transfers.append(Transfer(from_participant=debtor, to_participant=creditor, amount=amount))
        _requeue(creditors, small_creditors, credit - amount, creditor, epsilon)
        if debt > amount:
            _push(small_debtors, debt - amount, debtor)

    while debtors and small_creditors:
        debt, debtor = _pop(debtors)
        credit, creditor = _pop(small_creditors)
        amount = min(credit, debt)
        transfers.append(Transfer(from_participant=debtor, to_participant=creditor, amount=amount))
        _requeue(debtors, small_debtors, debt - amount, debtor, epsilon)
        if credit > amount:
            _push(small_creditors, credit - amount, creditor)

    logger.debug("Planned %d transfer(s) for %d balance(s)", len(transfers), len(balances))
    return transfers


def _push(heap: list[_Entry], magnitude: Decimal, participant: Participant) -> None:
    heapq.heappush(heap, (-magnitude, participant))


def _pop(heap: list[_Entry]) -> tuple[Decimal, Participant]:
    magnitude, participant = heapq.heappop(heap)
    return -magnitude, participant


def _requeue(
    heap: list[_Entry],
    residue: list[_Entry],
    remaining: Decimal,
    participant: Participant,
    epsilon: Decimal,
) -> None:
    if remaining > epsilon:
        _push(heap, remaining, participant)
    elif remaining > 0:
        _push(residue, remaining, participant)


def apply_transfers(
    balances: Mapping[Participant, Amount],
    transfers: Iterable[Transfer],
) -> dict[Participant, Decimal]:
    """Return the balances that remain after the transfers are paid.

    The payer's balance rises by the amount and the receiver's falls by it,
    the same way a recorded settlement is folded into balances.
    """
    result = {participant: to_decimal(value) for participant, value in balances.items()}
    for transfer in transfers:
        result[transfer.from_participant] = result.get(transfer.from_participant, Decimal(0)) + transfer.amount
        result[transfer.to_participant] = result.get(transfer.to_participant, Decimal(0)) - transfer.amount
    return result
