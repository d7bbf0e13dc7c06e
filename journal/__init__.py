"""
Trade journal module.

Track every trade, learn from mistakes, improve your performance.
"""

from .analytics import (
    TradeAnalytics,
    MonthSummary,
    win_rate,
    monthly_win_rate,
    win_loss_distribution,
    monthly_summary,
)
from .store import JournalStore
from .controller import JournalController, JournalView, EditForm, Idle, PendingDelete

__all__ = [
    "TradeAnalytics",
    "MonthSummary",
    "win_rate",
    "monthly_win_rate",
    "win_loss_distribution",
    "monthly_summary",
    "JournalStore",
    "JournalController",
    "JournalView",
    "EditForm",
    "Idle",
    "PendingDelete",
]
