"""Domain layer for settleup application.

The package exports the pure allocate -> aggregate -> plan pipeline. The
services that feed it from a database live in settleup.domain.group,
settleup.domain.expense and settleup.domain.ledger; they are not imported
here because the database layer imports settleup.domain.entities.
"""

from settleup.domain.allocation import allocate_split
from settleup.domain.balances import aggregate_balances, summarize_balances
from settleup.domain.settlement import plan_settlements, apply_transfers

__all__ = [
    "allocate_split",
    "aggregate_balances",
    "summarize_balances",
    "plan_settlements",
    "apply_transfers",
]
