"""
Tests for the JournalStore - diskcache-backed ledger persistence.
"""
import json
import pytest
from datetime import date

import pandas as pd

from ledger import Ledger, add_trade
from journal.store import (
    JournalStore,
    TRADES_KEY,
    STARTING_BALANCE_KEY,
    CURRENT_BALANCE_KEY,
)


@pytest.fixture
def ledger():
    ledger = Ledger.empty(2000)
    ledger = add_trade(ledger, "100", "2024-01-05")
    ledger = add_trade(ledger, "-50", "2024-01-01")
    return add_trade(ledger, "12.5", "2024-02-10")


class TestRoundTrip:
    """Save then load."""

    def test_empty_store_loads_none(self, store):
        assert store.load() is None

    def test_round_trip(self, store, ledger):
        store.save(ledger)
        loaded = store.load()
        assert loaded == ledger

    def test_survives_reopen(self, tmp_path, ledger):
        with JournalStore(tmp_path / "journal") as first:
            first.save(ledger)
        with JournalStore(tmp_path / "journal") as second:
            assert second.load() == ledger

    def test_dates_stored_as_iso_text(self, store, ledger):
        store.save(ledger)
        rows = json.loads(store.cache.get(TRADES_KEY))
        assert [r['date'] for r in rows] == ["2024-01-01", "2024-01-05", "2024-02-10"]
        assert json.loads(store.cache.get(CURRENT_BALANCE_KEY)) == ledger.current_balance
        assert json.loads(store.cache.get(STARTING_BALANCE_KEY)) == 2000

    def test_clear(self, store, ledger):
        store.save(ledger)
        store.clear()
        assert store.load() is None


class TestMalformedData:
    """Bad stored data degrades instead of raising."""

    def test_corrupt_trades_json(self, store):
        store.cache.set(TRADES_KEY, "{not json")
        assert store.load() is None

    def test_trades_not_a_list(self, store):
        store.cache.set(TRADES_KEY, json.dumps({"id": "x"}))
        assert store.load() is None

    def test_stored_balances_are_recomputed(self, store):
        rows = [
            {'id': 'b', 'date': '2024-01-05', 'profit': 100, 'balance': 1},
            {'id': 'a', 'date': '2024-01-01', 'profit': '-50', 'balance': 2},
        ]
        store.cache.set(TRADES_KEY, json.dumps(rows))
        store.cache.set(STARTING_BALANCE_KEY, json.dumps(1000))

        loaded = store.load()
        assert [t.id for t in loaded.trades] == ['a', 'b']
        assert [t.balance for t in loaded.trades] == [950, 1050]

    def test_bad_rows_degrade(self, store):
        rows = [
            {'id': 'a', 'date': 'garbage', 'profit': 'abc'},
            {'date': '2024-01-02', 'profit': 5},
            {'id': 'a', 'date': '2024-01-03', 'profit': 1},
            "not a row",
        ]
        store.cache.set(TRADES_KEY, json.dumps(rows))

        loaded = store.load()
        assert len(loaded) == 3
        assert len({t.id for t in loaded.trades}) == 3
        assert loaded.trades[0].date is None
        assert loaded.trades[0].profit == 0
        assert loaded.current_balance == loaded.starting_balance + 6

    def test_bad_starting_balance_uses_default(self, store):
        store.cache.set(TRADES_KEY, json.dumps([]))
        store.cache.set(STARTING_BALANCE_KEY, "\"lots\"")
        loaded = store.load()
        assert loaded.starting_balance == 1000


def test_export_to_csv(store, ledger, tmp_path):
    path = store.export_to_csv(ledger, tmp_path / "export.csv")
    df = pd.read_csv(path)
    assert list(df.columns) == ['id', 'date', 'profit', 'balance']
    assert list(df['balance']) == [1950.0, 2050.0, 2062.5]


class TestStoreErrors:
    """Storage failures are logged, never raised."""

    def test_failed_save_does_not_raise(self, store, ledger, monkeypatch):
        def failing_set(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(store.cache, "set", failing_set)
        store.save(ledger)
        monkeypatch.undo()
        assert store.load() is None

    def test_partial_save_is_rolled_back(self, store, ledger, monkeypatch):
        store.save(ledger)
        real_set = store.cache.set

        def failing_set(key, value, *args, **kwargs):
            if key == CURRENT_BALANCE_KEY:
                raise OSError("disk full")
            return real_set(key, value, *args, **kwargs)

        monkeypatch.setattr(store.cache, "set", failing_set)
        store.save(Ledger.empty(5))
        monkeypatch.undo()

        assert store.load() == ledger

    def test_read_error_loads_none(self, store, ledger, monkeypatch):
        store.save(ledger)

        def failing_get(*args, **kwargs):
            raise OSError("unreadable")

        monkeypatch.setattr(store.cache, "get", failing_get)
        assert store.load() is None
