"""
Journal store - keep the ledger across sessions.

The ledger is written to a disk-backed key-value store after every change and
read back at startup. Stored balances are never trusted: loaded trades are
always run through the ledger engine again.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import pandas as pd
from diskcache import Cache

from config import journal_config, paths
from ledger import Ledger, Trade, recompute, parse_date, parse_number, coerce
from ledger.engine import new_trade_id

logger = logging.getLogger(__name__)

TRADES_KEY = "trades"
STARTING_BALANCE_KEY = "starting_balance"
CURRENT_BALANCE_KEY = "current_balance"


class JournalStore:
    """
    Disk-backed persistence for a single ledger.

    Why diskcache?
    - Durable key-value storage with no server
    - Survives restarts
    - Perfect for a single-user journal
    """

    def __init__(self, store_dir: Optional[Path] = None):
        """
        Initialize journal store.

        Args:
            store_dir: Directory for the store (uses default if not provided)
        """
        self.store_dir = Path(store_dir) if store_dir else paths.journal_dir / "store"
        self.cache = Cache(directory=str(self.store_dir))
        logger.info(f"Journal store opened at: {self.store_dir}")

    def __enter__(self) -> "JournalStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @staticmethod
    def _encode_trade(trade: Trade) -> Dict[str, Any]:
        return {
            'id': trade.id,
            'date': trade.date.isoformat() if trade.date is not None else None,
            'profit': trade.profit,
            'balance': trade.balance,
        }

    @staticmethod
    def _decode_trades(rows: List[Any]) -> List[Trade]:
        trades = []
        seen = set()
        for row in rows:
            if not isinstance(row, dict):
                logger.warning(f"Skipping malformed trade row: {row!r}")
                continue

            trade_id = row.get('id')
            if trade_id is None or str(trade_id) in seen:
                trade_id = new_trade_id()
            trade_id = str(trade_id)
            seen.add(trade_id)

            trades.append(Trade(
                id=trade_id,
                date=parse_date(row.get('date')),
                profit=coerce(row.get('profit')),
            ))
        return trades

    def load(self) -> Optional[Ledger]:
        """
        Load the stored ledger.

        Returns:
            Ledger, or None if nothing usable is stored
        """
        try:
            raw_trades = self.cache.get(TRADES_KEY)
            raw_start = self.cache.get(STARTING_BALANCE_KEY)
        except Exception as e:
            logger.error(f"Error reading journal store: {e}")
            return None

        if raw_trades is None and raw_start is None:
            logger.info("No stored journal found")
            return None

        try:
            rows = json.loads(raw_trades) if raw_trades is not None else []
        except (TypeError, ValueError) as e:
            logger.error(f"Stored trades are malformed: {e}")
            return None

        if not isinstance(rows, list):
            logger.error(f"Stored trades are not a list: {type(rows).__name__}")
            return None

        starting_balance = None
        if raw_start is not None:
            try:
                starting_balance = parse_number(json.loads(raw_start))
            except (TypeError, ValueError):
                starting_balance = None
            if starting_balance is None:
                logger.warning(f"Stored starting balance {raw_start!r} is malformed, using default")
        if starting_balance is None:
            starting_balance = journal_config.default_starting_balance

        ledger = recompute(self._decode_trades(rows), starting_balance)
        logger.info(f"Loaded {len(ledger)} trades from {self.store_dir}")
        return ledger

    def save(self, ledger: Ledger) -> None:
        """Persist the ledger. Failures are logged, not raised."""
        try:
            with self.cache.transact():
                self.cache.set(TRADES_KEY, json.dumps([self._encode_trade(t) for t in ledger.trades]))
                self.cache.set(STARTING_BALANCE_KEY, json.dumps(ledger.starting_balance))
                self.cache.set(CURRENT_BALANCE_KEY, json.dumps(ledger.current_balance))
            logger.debug(f"Saved {len(ledger)} trades to {self.store_dir}")
        except Exception as e:
            logger.error(f"Error saving journal: {e}")

    def clear(self) -> None:
        """Remove the stored journal."""
        self.cache.clear()
        logger.info("Journal store cleared")

    def close(self) -> None:
        self.cache.close()

    def export_to_csv(self, ledger: Ledger, output_path: Optional[Path] = None) -> Path:
        """Export trades to CSV for analysis in Excel/Sheets."""
        output_path = Path(output_path) if output_path else paths.journal_dir / "trades_export.csv"
        df = pd.DataFrame(
            [self._encode_trade(t) for t in ledger.trades],
            columns=['id', 'date', 'profit', 'balance'],
        )
        df.to_csv(output_path, index=False)
        logger.info(f"Exported {len(df)} trades to {output_path}")
        return output_path
