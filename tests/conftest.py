"""
Pytest fixtures for the test suite.
"""
import pytest
import sys
import os
from datetime import date

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import JournalConfig
from ledger import Ledger, Trade
from journal.store import JournalStore


def make_trade(trade_id, day, profit, balance=0.0):
    """Build a trade without going through the engine."""
    return Trade(id=trade_id, date=day, profit=profit, balance=balance)


@pytest.fixture
def empty_ledger():
    """Fresh ledger with the default starting balance."""
    return Ledger(starting_balance=1000.0)


@pytest.fixture
def lenient_config():
    return JournalConfig(default_starting_balance=1000.0, strict_input=False)


@pytest.fixture
def strict_config():
    return JournalConfig(default_starting_balance=1000.0, strict_input=True)


@pytest.fixture
def store(tmp_path):
    """Journal store in a temp directory."""
    with JournalStore(tmp_path / "store") as s:
        yield s


@pytest.fixture
def fixed_today():
    return lambda: date(2024, 1, 20)
