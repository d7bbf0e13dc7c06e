"""
Journal controller - the single owner of the current ledger.

User intents from the UI come in here, go through the ledger engine, and the
resulting ledger is saved. Derived views are rebuilt on request.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import logging

from config import JournalConfig, journal_config
from ledger import Ledger, Trade
from ledger import engine
from .analytics import (
    MonthSummary,
    monthly_summary,
    monthly_win_rate,
    win_loss_distribution,
    win_rate,
)
from .store import JournalStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    """No delete awaiting confirmation."""
    pass


@dataclass(frozen=True)
class PendingDelete:
    """A delete of `trade_id` awaiting confirmation."""
    trade_id: str


DeleteState = Union[Idle, PendingDelete]


@dataclass(frozen=True)
class EditForm:
    """Prefill values for the trade form."""
    trade_id: Optional[str] = None
    profit: str = ""
    date: str = ""


@dataclass
class JournalView:
    """Everything the UI renders, derived from one ledger snapshot."""
    trades: Tuple[Trade, ...]
    starting_balance: float
    current_balance: float
    win_rate: float
    monthly_win_rate: float
    distribution: Dict[str, int]
    monthly_summary: List[MonthSummary] = field(default_factory=list)


class JournalController:
    """
    Own the ledger and apply user intents to it.

    Every mutation replaces the ledger with a new snapshot and saves it.
    Intents that change nothing are not saved.
    """

    def __init__(self, ledger: Ledger, store: Optional[JournalStore] = None,
                 config: Optional[JournalConfig] = None,
                 today: Optional[Callable[[], date]] = None):
        self.ledger = ledger
        self.store = store
        self.config = config or journal_config
        self.today = today or date.today
        self.delete_state: DeleteState = Idle()
        self.editing_id: Optional[str] = None

    @classmethod
    def open(cls, store: Optional[JournalStore] = None,
             config: Optional[JournalConfig] = None,
             today: Optional[Callable[[], date]] = None) -> "JournalController":
        """Load the stored ledger, falling back to an empty one."""
        config = config or journal_config
        ledger = store.load() if store is not None else None
        if ledger is None:
            ledger = Ledger.empty(config.default_starting_balance)
            logger.info(f"Starting new journal with balance {ledger.starting_balance:,.2f}")
        return cls(ledger, store=store, config=config, today=today)

    def _commit(self, ledger: Ledger) -> bool:
        if ledger is self.ledger:
            return False
        self.ledger = ledger
        if self.store is not None:
            self.store.save(ledger)
        return True

    # Trade form

    def add_or_update(self, profit_input: Any, date_input: Any = None) -> bool:
        """
        Submit the trade form.

        Updates the trade being edited, or adds a new one.

        Returns:
            True if the ledger changed
        """
        strict = self.config.strict_input
        if self.editing_id is not None:
            ledger = engine.update_trade(self.ledger, self.editing_id, profit_input,
                                         date_input, strict=strict)
        else:
            ledger = engine.add_trade(self.ledger, profit_input, date_input,
                                      strict=strict, today=self.today())

        changed = self._commit(ledger)
        if changed:
            self.editing_id = None
        return changed

    def start_edit(self, trade: Union[Trade, str]) -> EditForm:
        """Put a trade into the form for editing."""
        trade_id = trade.id if isinstance(trade, Trade) else trade
        found = engine.find_trade(self.ledger, trade_id)
        if found is None:
            logger.warning(f"Trade {trade_id} not found for edit")
            self.editing_id = None
            return EditForm()

        self.editing_id = found.id
        return EditForm(
            trade_id=found.id,
            profit=format(found.profit, ".15g"),
            date=found.date.isoformat() if found.date is not None else "",
        )

    def cancel_edit(self) -> None:
        self.editing_id = None

    # Delete confirmation

    def request_delete(self, trade_id: str) -> None:
        self.delete_state = PendingDelete(trade_id)

    def cancel_delete(self) -> None:
        self.delete_state = Idle()

    def handle_escape(self) -> None:
        """Escape dismisses a pending delete."""
        self.cancel_delete()

    def confirm_delete(self) -> bool:
        """Delete the pending trade. Returns True if the ledger changed."""
        state = self.delete_state
        if not isinstance(state, PendingDelete):
            return False

        self.delete_state = Idle()
        if self.editing_id == state.trade_id:
            self.editing_id = None
        return self._commit(engine.delete_trade(self.ledger, state.trade_id))

    @property
    def pending_delete_id(self) -> Optional[str]:
        state = self.delete_state
        return state.trade_id if isinstance(state, PendingDelete) else None

    # Balance

    def set_starting_balance(self, value_input: Any) -> bool:
        ledger = engine.set_starting_balance(self.ledger, value_input,
                                             strict=self.config.strict_input)
        return self._commit(ledger)

    # Derived view

    def view(self, reference_date: Optional[date] = None) -> JournalView:
        """Derive everything the dashboard shows from the current ledger."""
        ledger = self.ledger
        return JournalView(
            trades=ledger.trades,
            starting_balance=ledger.starting_balance,
            current_balance=ledger.current_balance,
            win_rate=win_rate(ledger),
            monthly_win_rate=monthly_win_rate(ledger, reference_date or self.today()),
            distribution=win_loss_distribution(ledger),
            monthly_summary=monthly_summary(ledger),
        )
