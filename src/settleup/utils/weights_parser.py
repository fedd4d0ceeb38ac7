"""Parsing for PARTICIPANT=VALUE weight options."""

from decimal import Decimal

from settleup.utils.amount_parser import parse_amount


def parse_weights(entries: tuple[str, ...] | list[str]) -> dict[str, Decimal]:
    """Parse weight entries into a participant -> weight mapping.

    Each entry has the form "alice=40", "bob=12.50" or "carol=$12.50".
    Insertion order follows the entries.

    Raises:
        ValueError: If an entry is malformed or a participant repeats
    """
    weights: dict[str, Decimal] = {}
    for entry in entries:
        participant, sep, value = entry.partition("=")
        participant = participant.strip()
        if not sep or not participant or not value.strip():
            raise ValueError(f"Invalid weight '{entry}': expected PARTICIPANT=VALUE")
        if participant in weights:
            raise ValueError(f"Weight for '{participant}' given more than once")
        try:
            weights[participant] = parse_amount(value.rstrip("%"))
        except ValueError as e:
            raise ValueError(f"Invalid weight '{entry}': {e}")
    return weights
