"""Utility functions for settleup."""

from settleup.utils.date_parser import parse_date
from settleup.utils.amount_parser import parse_amount, to_decimal, format_amount
from settleup.utils.weights_parser import parse_weights

__all__ = ["parse_date", "parse_amount", "to_decimal", "format_amount", "parse_weights"]
