#!/usr/bin/env python3
"""
Trade Journal - Demo

This script demonstrates the complete workflow:
1. Open a journal
2. Add trades out of order
3. Edit and delete trades
4. Review win rate and monthly P&L

Run this to verify everything works. It writes to a throwaway store.
"""
import sys
import tempfile
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from journal.analytics import TradeAnalytics
from journal.controller import JournalController
from journal.store import JournalStore

import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def print_ledger(journal: JournalController):
    for trade in journal.ledger.trades:
        print(f"    {trade.date}  {trade.profit:+10.2f}  -> ${trade.balance:,.2f}")
    print(f"  Current Balance: ${journal.ledger.current_balance:,.2f}")


def main():
    print("""
╔══════════════════════════════════════════════════════════╗
║     TRADE JOURNAL - DEMO                                ║
╚══════════════════════════════════════════════════════════╝
    """)

    with tempfile.TemporaryDirectory() as tmp, JournalStore(Path(tmp) / "store") as store:
        # Step 1: Open journal
        print("\n[1/5] Opening journal...")
        journal = JournalController.open(store=store, today=lambda: date(2024, 1, 31))
        print(f"  ✅ Starting Balance: ${journal.ledger.starting_balance:,.2f}")

        # Step 2: Add trades out of order
        print("\n[2/5] Adding trades...")
        journal.add_or_update("100", "2024-01-05")
        journal.add_or_update("-50", "2024-01-01")
        journal.add_or_update("75.5", "2024-02-10")
        journal.add_or_update("0", "2024-02-12")
        print_ledger(journal)

        # Step 3: Edit
        print("\n[3/5] Editing the Jan-05 trade to -20...")
        target = next(t for t in journal.ledger.trades if t.date == date(2024, 1, 5))
        journal.start_edit(target)
        journal.add_or_update("-20", "2024-01-05")
        print_ledger(journal)

        # Step 4: Delete
        print("\n[4/5] Deleting the Jan-01 trade...")
        first = journal.ledger.trades[0]
        journal.request_delete(first.id)
        journal.confirm_delete()
        print_ledger(journal)

        # Step 5: Analytics
        print("\n[5/5] Analytics:")
        view = journal.view()
        print(f"  Win Rate: {view.win_rate:.2f}%")
        print(f"  This Month: {view.monthly_win_rate:.2f}%")
        print(f"  Wins/Losses: {view.distribution['wins']}/{view.distribution['losses']}")
        for month in view.monthly_summary:
            print(f"  {month.month_key}: ${month.total_profit:,.2f} "
                  f"({month.trade_count} trades, {month.win_rate:.2f}% win)")

        print(TradeAnalytics(journal.ledger).generate_report())

        with JournalStore(Path(tmp) / "store") as reader:
            reloaded = reader.load()
        print(f"  ✅ Reloaded {len(reloaded)} trades, balance ${reloaded.current_balance:,.2f}")

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
    print("\nTo run the UI: python3 -m streamlit run ui/app.py")
    print("=" * 60)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nDemo interrupted by user")
    except Exception as e:
        logger.error(f"Demo failed: {e}", exc_info=True)
        print(f"\n❌ Error: {e}")
