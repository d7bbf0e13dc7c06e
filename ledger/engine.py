"""
Ledger engine - the ordered, balance-annotated trade sequence.

Every mutation is a full rebuild: trades are stable-sorted by date and the
running balance is reassigned from the starting balance forward. Each call
returns a new Ledger; nothing is updated in place.
"""
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Iterable, Optional, Tuple
import logging
import uuid

from config import journal_config
from .coercion import coerce, parse_number, parse_date, is_blank

logger = logging.getLogger(__name__)


class LedgerInputError(ValueError):
    """Raised for unparsable input when strict validation is enabled."""
    pass


@dataclass(frozen=True)
class Trade:
    """A single P&L entry. `balance` is derived by `recompute`."""
    id: str
    date: Optional[date]
    profit: float
    balance: float = 0.0

    @property
    def is_win(self) -> bool:
        return self.profit > 0


@dataclass(frozen=True)
class Ledger:
    """Immutable ledger snapshot: starting balance plus date-ordered trades."""
    starting_balance: float
    trades: Tuple[Trade, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls, starting_balance: Optional[float] = None) -> "Ledger":
        if starting_balance is None:
            starting_balance = journal_config.default_starting_balance
        return cls(starting_balance=coerce(starting_balance))

    @property
    def current_balance(self) -> float:
        if not self.trades:
            return self.starting_balance
        return self.trades[-1].balance

    @property
    def total_profit(self) -> float:
        return self.current_balance - self.starting_balance

    def __len__(self) -> int:
        return len(self.trades)


def new_trade_id() -> str:
    return uuid.uuid4().hex


def _sort_key(trade: Trade) -> date:
    # Undated trades sort ahead of everything else
    return trade.date if trade.date is not None else date.min


def _strict(strict: Optional[bool]) -> bool:
    return journal_config.strict_input if strict is None else strict


def _read_profit(value: Any, strict: bool) -> float:
    parsed = parse_number(value)
    if parsed is None:
        if strict:
            raise LedgerInputError(f"Invalid profit: {value!r}")
        return coerce(value)
    return parsed


def _read_date(value: Any, strict: bool) -> Optional[date]:
    parsed = parse_date(value)
    if parsed is None and strict:
        raise LedgerInputError(f"Invalid date: {value!r}")
    return parsed


def recompute(trades: Iterable[Trade], starting_balance: Any) -> Ledger:
    """
    Rebuild a ledger from an arbitrary collection of trades.

    Args:
        trades: Trades in any order (stored balances are ignored)
        starting_balance: Balance before the first trade

    Returns:
        Ledger with trades sorted by date (stable) and balances reassigned
    """
    start = coerce(starting_balance)
    coerced = [replace(t, profit=coerce(t.profit), date=parse_date(t.date)) for t in trades]
    ordered = sorted(coerced, key=_sort_key)

    running = start
    rebuilt = []
    for trade in ordered:
        running += trade.profit
        rebuilt.append(replace(trade, balance=running))

    return Ledger(starting_balance=start, trades=tuple(rebuilt))


def find_trade(ledger: Ledger, trade_id: Any) -> Optional[Trade]:
    """Get a specific trade by ID."""
    for trade in ledger.trades:
        if trade.id == trade_id:
            return trade
    return None


def add_trade(ledger: Ledger, profit: Any, trade_date: Any = None, *,
              strict: Optional[bool] = None,
              today: Optional[date] = None) -> Ledger:
    """
    Add a new trade.

    Args:
        ledger: Current ledger
        profit: Profit input; blank input leaves the ledger unchanged
        trade_date: Trade date; defaults to today when absent
        strict: Raise LedgerInputError on unparsable input
        today: Override for the default date

    Returns:
        New ledger including the trade
    """
    if is_blank(profit):
        logger.debug("Ignoring add with empty profit")
        return ledger

    strict = _strict(strict)
    amount = _read_profit(profit, strict)
    if is_blank(trade_date):
        when = today or date.today()
    else:
        when = _read_date(trade_date, strict)

    trade = Trade(id=new_trade_id(), date=when, profit=amount)
    logger.info(f"Added trade {trade.id}: {amount:+.2f} on {when}")
    return recompute(ledger.trades + (trade,), ledger.starting_balance)


def update_trade(ledger: Ledger, trade_id: Any, profit: Any,
                 trade_date: Any = None, *,
                 strict: Optional[bool] = None) -> Ledger:
    """
    Replace the profit and date of an existing trade, keeping its id.

    Unknown ids and blank profit leave the ledger unchanged. A blank date
    keeps the trade's current date.
    """
    existing = find_trade(ledger, trade_id)
    if existing is None:
        logger.warning(f"Trade {trade_id} not found for update")
        return ledger
    if is_blank(profit):
        logger.debug(f"Ignoring update of {trade_id} with empty profit")
        return ledger

    strict = _strict(strict)
    amount = _read_profit(profit, strict)
    when = existing.date if is_blank(trade_date) else _read_date(trade_date, strict)

    updated = replace(existing, profit=amount, date=when)
    trades = [updated if t.id == trade_id else t for t in ledger.trades]
    logger.info(f"Updated trade {trade_id}: {amount:+.2f} on {when}")
    return recompute(trades, ledger.starting_balance)


def delete_trade(ledger: Ledger, trade_id: Any) -> Ledger:
    """Remove a trade. Unknown ids leave the ledger unchanged."""
    remaining = [t for t in ledger.trades if t.id != trade_id]
    if len(remaining) == len(ledger.trades):
        logger.warning(f"Trade {trade_id} not found for delete")
        return ledger

    logger.info(f"Deleted trade {trade_id}")
    return recompute(remaining, ledger.starting_balance)


def set_starting_balance(ledger: Ledger, value: Any, *,
                         strict: Optional[bool] = None) -> Ledger:
    """Change the starting balance; invalid input keeps the previous one."""
    parsed = parse_number(value)
    if parsed is None:
        if _strict(strict):
            raise LedgerInputError(f"Invalid starting balance: {value!r}")
        logger.warning(f"Rejected starting balance {value!r}")
        return ledger

    logger.info(f"Starting balance set to {parsed:,.2f}")
    return recompute(ledger.trades, parsed)
