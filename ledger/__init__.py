"""
Ledger engine for the trade journal.

Keeps trades in date order with a running balance that is always derived,
never stored as a source of truth.
"""

from .coercion import coerce, parse_number, parse_date, is_blank
from .engine import (
    Trade,
    Ledger,
    LedgerInputError,
    recompute,
    add_trade,
    update_trade,
    delete_trade,
    set_starting_balance,
    find_trade,
)

__all__ = [
    "coerce",
    "parse_number",
    "parse_date",
    "is_blank",
    "Trade",
    "Ledger",
    "LedgerInputError",
    "recompute",
    "add_trade",
    "update_trade",
    "delete_trade",
    "set_starting_balance",
    "find_trade",
]
