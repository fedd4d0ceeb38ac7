"""Split allocation: divide one expense total among its participants.

Every rule reduces to a set of non-negative weights. Each participant's raw
share is ``total * weight / sum(weights)``; raw shares are truncated to cents
and the leftover cents go to the participants with the largest truncated
remainder (largest-remainder method), ties broken by ascending participant.
The resulting amounts always add up to the total exactly.
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal, ROUND_DOWN
from typing import Optional

from settleup.domain.entities import Participant, Split, SplitRule
from settleup.domain.errors import SplitValidationError, ValidationError
from settleup.utils.amount_parser import CENT, to_decimal

logger = logging.getLogger(__name__)

SUM_TOLERANCE = Decimal("0.01")
HUNDRED = Decimal("100")


def parse_split_rule(rule: SplitRule | str) -> SplitRule:
    """Return the SplitRule for an enum member or its string value."""
    if isinstance(rule, SplitRule):
        return rule
    try:
        return SplitRule(str(rule).strip().lower())
    except ValueError:
        choices = ", ".join(r.value for r in SplitRule)
        raise ValidationError(f"Unknown split rule '{rule}'. Expected one of: {choices}")


def allocate_split(
    total: Decimal | int | float | str,
    rule: SplitRule | str,
    participants: Sequence[Participant],
    weights: Optional[Mapping[Participant, Decimal | int | float | str]] = None,
    expense_id: Optional[int] = None,
) -> tuple[Split, ...]:
    """Allocate an expense total among participants.

    Args:
        total: Expense total, positive and in whole cents
        rule: Split rule
        participants: Ordered participants, each listed once
        weights: Per-participant weights; ignored for the equal rule. Amounts
            for exact, percentages for percentage, share counts for shares.
        expense_id: Optional expense ID stamped onto the returned splits

    Returns:
        One Split per participant, in participant order, summing to total

    Raises:
        SplitValidationError: If the configuration cannot be allocated. No
            partial allocation is ever returned.
    """
    rule = parse_split_rule(rule)
    name = rule.value

    try:
        total = to_decimal(total)
    except ValueError as e:
        raise SplitValidationError(name, f"total is not a number ({e})")
    if total <= 0:
        raise SplitValidationError(name, f"total must be positive, got {total}")
    if total != total.quantize(CENT):
        raise SplitValidationError(name, f"total must be in whole cents, got {total}")

    participants = list(participants)
    if not participants:
        raise SplitValidationError(name, "at least one participant is required")
    seen: set[Participant] = set()
    for participant in participants:
        if participant in seen:
            raise SplitValidationError(name, f"participant '{participant}' is listed more than once")
        seen.add(participant)

    if rule == SplitRule.EQUAL:
        basis = {participant: Decimal(1) for participant in participants}
        recorded: dict[Participant, Optional[Decimal]] = dict.fromkeys(participants)
    else:
        basis = _resolve_weights(rule, participants, weights)
        _check_weight_sum(rule, total, basis)
        recorded = dict(basis)

    amounts = largest_remainder(total, participants, basis)
    logger.debug("Allocated %s %s ways (%s): %s", total, len(participants), name, amounts)
    return tuple(
        Split(
            participant=participant,
            amount=amounts[participant],
            weight=recorded[participant],
            expense_id=expense_id,
        )
        for participant in participants
    )


def _resolve_weights(
    rule: SplitRule,
    participants: list[Participant],
    weights: Optional[Mapping[Participant, Decimal | int | float | str]],
) -> dict[Participant, Decimal]:
    """Validate per-participant weights and coerce them to Decimal."""
    name = rule.value
    if not weights:
        raise SplitValidationError(name, "a weight is required for every participant")

    unknown = sorted(set(weights) - set(participants))
    if unknown:
        raise SplitValidationError(
            name, f"weights given for non-participants: {', '.join(map(str, unknown))}"
        )

    resolved: dict[Participant, Decimal] = {}
    for participant in participants:
        if participant not in weights:
            raise SplitValidationError(name, f"missing weight for '{participant}'")
        try:
            weight = to_decimal(weights[participant])
        except ValueError as e:
            raise SplitValidationError(name, f"weight for '{participant}' is not a number ({e})")
        if weight < 0:
            raise SplitValidationError(name, f"weight for '{participant}' is negative ({weight})")
        if rule == SplitRule.SHARES and weight == 0:
            raise SplitValidationError(name, f"share count for '{participant}' must be positive")
        resolved[participant] = weight
    return resolved


def _check_weight_sum(rule: SplitRule, total: Decimal, weights: dict[Participant, Decimal]) -> None:
    weight_sum = sum(weights.values(), Decimal(0))
    if weight_sum <= 0:
        raise SplitValidationError(rule.value, "weights must add up to a positive number")
    if rule == SplitRule.EXACT:
        if abs(weight_sum - total) > SUM_TOLERANCE:
            raise SplitValidationError(
                rule.value, "amounts must add up to the total", computed=weight_sum, expected=total
            )
    elif rule == SplitRule.PERCENTAGE:
        if abs(weight_sum - HUNDRED) > SUM_TOLERANCE:
            raise SplitValidationError(
                rule.value, "percentages must add up to 100", computed=weight_sum, expected=HUNDRED
            )


def largest_remainder(
    total: Decimal,
    participants: Sequence[Participant],
    weights: Mapping[Participant, Decimal],
) -> dict[Participant, Decimal]:
    """Split total proportionally to weights, in whole cents, summing exactly.

    Args:
        total: Amount to distribute, in whole cents
        participants: Participants to receive a share
        weights: Non-negative weight per participant with a positive sum

    Returns:
        Mapping participant -> amount
    """
    weight_sum = sum((weights[p] for p in participants), Decimal(0))
    truncated: dict[Participant, Decimal] = {}
    remainders: dict[Participant, Decimal] = {}
    for participant in participants:
        raw = total * weights[participant] / weight_sum
        truncated[participant] = raw.quantize(CENT, rounding=ROUND_DOWN)
        remainders[participant] = raw - truncated[participant]

    leftover_cents = int((total - sum(truncated.values(), Decimal(0))) / CENT)
    order = sorted(participants, key=lambda p: (-remainders[p], p))
    for i in range(leftover_cents):
        truncated[order[i % len(order)]] += CENT
    return truncated
