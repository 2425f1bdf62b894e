"""Tests for ReportAggregator."""

from datetime import UTC, date, datetime, time
from unittest.mock import AsyncMock

import pytest

from stockroom.core.entities import InventoryItem, Transaction, TransactionType, User
from stockroom.core.services import ReportAggregator
from stockroom.core.services.report_aggregator import range_end, range_start, turnover


@pytest.fixture
def stores():
    items = AsyncMock()
    transactions = AsyncMock()
    users = AsyncMock()
    items.list_items.return_value = []
    items.get_items.return_value = {}
    transactions.quantity_totals.return_value = {}
    transactions.list_transactions.return_value = []
    users.get_users.return_value = {}
    return items, transactions, users


@pytest.fixture
def aggregator(stores):
    items, transactions, users = stores
    return ReportAggregator(items, transactions, users)


class TestRangeHelpers:
    def test_bare_dates_cover_whole_days(self):
        assert range_start(date(2024, 3, 1)) == datetime(2024, 3, 1, tzinfo=UTC)
        assert range_end(date(2024, 3, 1)) == datetime.combine(
            date(2024, 3, 1), time.max, tzinfo=UTC
        )

    def test_naive_datetimes_are_utc(self):
        assert range_start(datetime(2024, 3, 1, 12)).tzinfo == UTC

    def test_none_passes_through(self):
        assert range_start(None) is None
        assert range_end(None) is None

    def test_turnover(self):
        assert turnover(5, 10) == 0.5
        assert turnover(5, 0) is None


class TestInventoryReport:
    async def test_rows_include_totals_and_turnover(self, aggregator, stores):
        items, transactions, _ = stores
        items.list_items.return_value = [
            InventoryItem(id=1, name="Bolt", category="hw", quantity=10, reorder_point=2, unit_price=1.5),
            InventoryItem(id=2, name="Nut", category="hw", quantity=0, unit_price=0.5),
        ]
        transactions.quantity_totals.return_value = {
            1: {TransactionType.STOCK_IN: 12, TransactionType.STOCK_OUT: 4},
            2: {TransactionType.STOCK_OUT: 3},
        }

        rows = await aggregator.inventory_report(category="hw")

        items.list_items.assert_awaited_once_with(category="hw", limit=None)
        bolt, nut = rows
        assert (bolt.stock_in, bolt.stock_out, bolt.turnover, bolt.value) == (12, 4, 0.4, 15.0)
        assert (nut.stock_in, nut.stock_out, nut.turnover, nut.value) == (0, 3, None, 0.0)

    async def test_date_range_is_widened(self, aggregator, stores):
        _, transactions, _ = stores

        await aggregator.inventory_report(start=date(2024, 1, 1), end=date(2024, 1, 31))

        kwargs = transactions.quantity_totals.await_args.kwargs
        assert kwargs["start"] == datetime(2024, 1, 1, tzinfo=UTC)
        assert kwargs["end"].date() == date(2024, 1, 31)
        assert kwargs["end"].time() == time.max


class TestTransactionReport:
    async def test_joins_item_and_creator(self, aggregator, stores):
        items, transactions, users = stores
        transactions.list_transactions.return_value = [
            Transaction(
                id=1, item_id=1, type=TransactionType.STOCK_IN, quantity=5,
                date=datetime(2024, 1, 1, tzinfo=UTC), created_by=7, total_value=10.0,
            ),
            Transaction(
                id=2, item_id=1, type=TransactionType.STOCK_OUT, quantity=2,
                date=datetime(2024, 1, 2, tzinfo=UTC), created_by=7, total_value=4.0,
            ),
        ]
        items.get_items.return_value = {
            1: InventoryItem(id=1, name="Bolt", category="hw", unit_price=2.0),
        }
        users.get_users.return_value = {
            7: User(id=7, username="alice", email="a@example.com", password_hash="x"),
        }

        rows = await aggregator.transaction_report()

        assert [r.id for r in rows] == [2, 1]
        assert rows[0].item_name == "Bolt"
        assert rows[0].item_category == "hw"
        assert rows[0].unit_price == 2.0
        assert rows[0].created_by == "alice"

    async def test_unresolved_joins_are_none(self, aggregator, stores):
        _, transactions, _ = stores
        transactions.list_transactions.return_value = [
            Transaction(id=1, item_id=9, type=TransactionType.STOCK_IN, quantity=1, created_by=8),
        ]

        (row,) = await aggregator.transaction_report(transaction_type=TransactionType.STOCK_IN)

        assert row.item_name is None
        assert row.unit_price is None
        assert row.created_by is None
        kwargs = transactions.list_transactions.await_args.kwargs
        assert kwargs["transaction_type"] == TransactionType.STOCK_IN
        assert kwargs["limit"] is None
