"""
Trade analytics - analyze your performance.

Learn from your trades. What works? What doesn't?

All functions here are read-only over a ledger snapshot.
"""
import pandas as pd
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Dict, Any, Iterable, List, Optional, Union
import logging

from ledger import Ledger, Trade

logger = logging.getLogger(__name__)

TradeSource = Union[Ledger, Iterable[Trade]]


@dataclass
class MonthSummary:
    """Aggregate P&L for one calendar month."""
    month_key: str
    total_profit: float
    trade_count: int
    win_rate: float

    def to_dict(self) -> dict:
        return asdict(self)


def _trades(source: TradeSource) -> List[Trade]:
    if isinstance(source, Ledger):
        return list(source.trades)
    return list(source)


def _rate(wins: int, total: int) -> float:
    if total == 0:
        return 0
    return round(wins / total * 100, 2)


def month_key(day: date) -> str:
    """Format a date's month as YYYY-MM."""
    return f"{day.year:04d}-{day.month:02d}"


def win_rate(trades: TradeSource) -> float:
    """Percentage of trades with strictly positive profit (0 when empty)."""
    trades = _trades(trades)
    wins = sum(1 for t in trades if t.profit > 0)
    return _rate(wins, len(trades))


def monthly_win_rate(trades: TradeSource, reference_date: Optional[date] = None) -> float:
    """Win rate restricted to the calendar month of `reference_date`."""
    reference_date = reference_date or date.today()
    if isinstance(reference_date, datetime):
        reference_date = reference_date.date()

    in_month = [
        t for t in _trades(trades)
        if t.date is not None
        and t.date.year == reference_date.year
        and t.date.month == reference_date.month
    ]
    return win_rate(in_month)


def win_loss_distribution(trades: TradeSource) -> Dict[str, int]:
    """Count wins and losses. Break-even trades count as losses."""
    trades = _trades(trades)
    wins = sum(1 for t in trades if t.profit > 0)
    return {'wins': wins, 'losses': len(trades) - wins}


def monthly_summary(trades: TradeSource) -> List[MonthSummary]:
    """
    Group trades by calendar month.

    Returns:
        One MonthSummary per month, ascending by month key. Trades without a
        valid date have no month and are left out.
    """
    dated = [t for t in _trades(trades) if t.date is not None]
    if not dated:
        return []

    df = pd.DataFrame({
        'month_key': [month_key(t.date) for t in dated],
        'profit': [float(t.profit) for t in dated],
    })

    summary = []
    for key, group in df.groupby('month_key', sort=True):
        profits = group['profit']
        summary.append(MonthSummary(
            month_key=key,
            total_profit=float(profits.sum()),
            trade_count=int(len(group)),
            win_rate=_rate(int((profits > 0).sum()), len(group)),
        ))

    return summary


class TradeAnalytics:
    """
    Analyze a ledger snapshot and generate insights.

    Metrics tracked:
    - Win rate
    - Average win/loss
    - Profit factor
    - Best and worst trades
    - Performance by month
    - Winning and losing streaks
    """

    def __init__(self, ledger: Ledger):
        """
        Initialize with a ledger snapshot.

        Args:
            ledger: Ledger returned by the engine
        """
        self.ledger = ledger
        self.df = self.balance_history()

        logger.debug(f"TradeAnalytics initialized with {len(self.df)} trades")

    def balance_history(self) -> pd.DataFrame:
        """Trades in ledger order with their running balance."""
        return pd.DataFrame(
            [
                {
                    'id': t.id,
                    'date': pd.Timestamp(t.date) if t.date is not None else pd.NaT,
                    'profit': float(t.profit),
                    'balance': float(t.balance),
                }
                for t in self.ledger.trades
            ],
            columns=['id', 'date', 'profit', 'balance'],
        )

    def monthly_summary_frame(self) -> pd.DataFrame:
        """Monthly summary as a DataFrame."""
        return pd.DataFrame(
            [m.to_dict() for m in monthly_summary(self.ledger)],
            columns=['month_key', 'total_profit', 'trade_count', 'win_rate'],
        )

    def calculate_performance_metrics(self) -> Dict[str, Any]:
        """
        Calculate core performance metrics.

        Returns:
            Dict with all key metrics
        """
        trades = self.df

        if trades.empty:
            return {
                'total_trades': 0,
                'starting_balance': self.ledger.starting_balance,
                'current_balance': self.ledger.current_balance,
                'message': 'No trades recorded yet'
            }

        # Basic stats
        total_trades = len(trades)
        distribution = win_loss_distribution(self.ledger)
        wins = distribution['wins']
        losses = distribution['losses']

        # P&L stats
        winners = trades[trades['profit'] > 0]['profit']
        losers = trades[trades['profit'] <= 0]['profit']
        total_pnl = trades['profit'].sum()
        avg_pnl = trades['profit'].mean()
        avg_win = winners.mean() if wins > 0 else 0
        avg_loss = losers.mean() if losses > 0 else 0

        # Profit factor (gross wins / gross losses)
        gross_wins = winners.sum()
        gross_losses = abs(losers.sum())
        profit_factor = gross_wins / gross_losses if gross_losses > 0 else 0

        # Expectancy (avg win * win_rate) - (avg_loss * loss_rate)
        expectancy = (avg_win * wins / total_trades) - (abs(avg_loss) * losses / total_trades)

        start = self.ledger.starting_balance
        return_pct = self.ledger.total_profit / start * 100 if start else 0

        return {
            'total_trades': total_trades,
            'wins': wins,
            'losses': losses,
            'win_rate': win_rate(self.ledger),
            'total_pnl': float(total_pnl),
            'avg_pnl': float(avg_pnl),
            'avg_win': float(avg_win),
            'avg_loss': float(avg_loss),
            'profit_factor': float(profit_factor),
            'best_trade': float(trades['profit'].max()),
            'worst_trade': float(trades['profit'].min()),
            'expectancy': float(expectancy),
            'starting_balance': start,
            'current_balance': self.ledger.current_balance,
            'return_pct': float(return_pct),
        }

    def calculate_streaks(self) -> Dict[str, int]:
        """Calculate winning and losing streaks in ledger order."""
        current_streak = 0
        max_win_streak = 0
        max_lose_streak = 0
        streak_type = None  # 'win' or 'loss'

        for trade in self.ledger.trades:
            if trade.is_win:
                if streak_type == 'win':
                    current_streak += 1
                else:
                    current_streak = 1
                    streak_type = 'win'
                max_win_streak = max(max_win_streak, current_streak)
            else:
                if streak_type == 'loss':
                    current_streak += 1
                else:
                    current_streak = 1
                    streak_type = 'loss'
                max_lose_streak = max(max_lose_streak, current_streak)

        return {
            'max_win_streak': max_win_streak,
            'max_lose_streak': max_lose_streak,
        }

    def generate_report(self, reference_date: Optional[date] = None) -> str:
        """Generate a plain-text performance report."""
        metrics = self.calculate_performance_metrics()

        if 'message' in metrics:
            return metrics['message']

        streaks = self.calculate_streaks()
        month_rate = monthly_win_rate(self.ledger, reference_date)

        months = "\n".join(
            f"{m.month_key}: ${m.total_profit:,.2f} over {m.trade_count} trades ({m.win_rate:.2f}% win)"
            for m in monthly_summary(self.ledger)
        ) or "No dated trades"

        report = f"""
PERFORMANCE REPORT
{'=' * 60}
Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

OVERALL METRICS
{'=' * 60}
Total Trades: {metrics['total_trades']}
Wins: {metrics['wins']}  |  Losses: {metrics['losses']}
Win Rate: {metrics['win_rate']:.2f}%  |  This Month: {month_rate:.2f}%

BALANCE
{'=' * 60}
Starting Balance: ${metrics['starting_balance']:,.2f}
Current Balance: ${metrics['current_balance']:,.2f}
Return: {metrics['return_pct']:+.2f}%

P&L SUMMARY
{'=' * 60}
Total P&L: ${metrics['total_pnl']:,.2f}
Avg P&L: ${metrics['avg_pnl']:.2f}
Avg Win: ${metrics['avg_win']:.2f}  |  Avg Loss: ${metrics['avg_loss']:.2f}
Best Trade: ${metrics['best_trade']:.2f}  |  Worst Trade: ${metrics['worst_trade']:.2f}
Profit Factor: {metrics['profit_factor']:.2f}
Expectancy: ${metrics['expectancy']:.2f} per trade

STREAKS
{'=' * 60}
Max Win Streak: {streaks['max_win_streak']}
Max Losing Streak: {streaks['max_lose_streak']}

MONTHLY P&L
{'=' * 60}
{months}

{'=' * 60}
"""

        return report
