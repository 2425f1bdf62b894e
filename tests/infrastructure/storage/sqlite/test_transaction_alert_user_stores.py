"""Tests for the transaction, alert and user stores."""

from datetime import UTC, datetime, timedelta, timezone

import aiosqlite
import pytest

from stockroom.core.entities import (
    Alert,
    AlertStatus,
    AlertType,
    Transaction,
    TransactionType,
    User,
)
from stockroom.core.exceptions import ConflictError
from stockroom.infrastructure.storage.sqlite import (
    SQLiteAlertStore,
    SQLiteTransactionStore,
    SQLiteUserStore,
)
from stockroom.infrastructure.storage.sqlite.base import from_db_timestamp, to_db_timestamp


class TestTimestamps:
    def test_naive_is_treated_as_utc(self):
        assert to_db_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000000+00:00"

    def test_offsets_are_normalized(self):
        value = datetime(2024, 1, 2, 7, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_db_timestamp(value) == "2024-01-02T05:00:00.000000+00:00"
        assert from_db_timestamp(to_db_timestamp(value)) == value

    def test_bad_values(self):
        assert to_db_timestamp(None) is None
        assert from_db_timestamp("") is None
        assert from_db_timestamp("yesterday") is None


class TestTransactionStore:
    @pytest.fixture
    async def history(self, make_item, user):
        item = await make_item(quantity=100)
        store = SQLiteTransactionStore()
        base = datetime(2024, 3, 1, 12, tzinfo=UTC)
        for day, (kind, qty) in enumerate(
            [
                (TransactionType.STOCK_IN, 10),
                (TransactionType.STOCK_OUT, 4),
                (TransactionType.STOCK_OUT, 1),
            ]
        ):
            await store.add_transaction(
                Transaction(
                    item_id=item.id, type=kind, quantity=qty,
                    date=base + timedelta(days=day), created_by=user.id,
                )
            )
        return item, store

    async def test_newest_first(self, history):
        item, store = history
        dates = [t.date for t in await store.list_transactions(item_id=item.id)]
        assert dates == sorted(dates, reverse=True)

    async def test_date_and_type_filters(self, history):
        item, store = history
        start = datetime(2024, 3, 2, tzinfo=UTC)
        assert await store.count_transactions(start=start) == 2
        assert await store.count_transactions(
            transaction_type=TransactionType.STOCK_OUT, end=start
        ) == 0

    async def test_quantity_totals(self, history):
        item, store = history
        totals = await store.quantity_totals()
        assert totals[item.id] == {TransactionType.STOCK_IN: 10, TransactionType.STOCK_OUT: 5}

    async def test_rows_cannot_be_changed(self, history, db):
        item, store = history
        async with db.acquire() as conn:
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute("DELETE FROM transactions WHERE item_id = ?", (item.id,))
            await conn.rollback()

    async def test_get_transaction(self, history):
        item, store = history
        (latest, *_) = await store.list_transactions(item_id=item.id, limit=1)
        fetched = await store.get_transaction(latest.id)
        assert fetched == latest
        assert await store.get_transaction(999) is None


class TestAlertStore:
    async def test_second_active_alert_is_a_conflict(self, make_item, user):
        item = await make_item()
        store = SQLiteAlertStore()
        first = await store.create_alert(
            Alert(item_id=item.id, type=AlertType.OUT_OF_STOCK, message="out", created_by=user.id)
        )

        with pytest.raises(ConflictError):
            await store.create_alert(
                Alert(item_id=item.id, type=AlertType.LOW_STOCK, message="low", created_by=user.id)
            )

        assert (await store.get_active_alert(item.id)).id == first.id

    async def test_resolved_alerts_do_not_block_new_ones(self, make_item, user):
        item = await make_item()
        store = SQLiteAlertStore()
        first = await store.create_alert(
            Alert(item_id=item.id, type=AlertType.OUT_OF_STOCK, message="out", created_by=user.id)
        )
        first.resolve()
        await store.update_alert(first)

        second = await store.create_alert(
            Alert(item_id=item.id, type=AlertType.LOW_STOCK, message="low", created_by=user.id)
        )

        assert second.id != first.id
        assert len(await store.list_alerts(status=AlertStatus.RESOLVED)) == 1
        assert await store.delete_for_item(item.id) == 2


class TestUserStore:
    async def test_lookup_by_identifier(self, user):
        store = SQLiteUserStore()
        assert (await store.get_by_identifier("alice")).id == user.id
        assert (await store.get_by_identifier("alice@example.com")).id == user.id
        assert await store.get_by_identifier("bob") is None

    async def test_email_lookup_ignores_case(self, user):
        assert (await SQLiteUserStore().get_by_email("ALICE@example.com")).id == user.id

    async def test_preferences_roundtrip(self, user):
        store = SQLiteUserStore()
        user.preferences.theme = "dark"
        user.preferences.notifications.email = False
        await store.update_user(user)

        fetched = await store.get_user(user.id)
        assert fetched.preferences.theme == "dark"
        assert fetched.preferences.notifications.email is False

    @pytest.mark.parametrize(
        ("username", "email"),
        [("alice", "other@example.com"), ("other", "alice@example.com")],
    )
    async def test_duplicates_are_conflicts(self, user, username, email):
        with pytest.raises(ConflictError):
            await SQLiteUserStore().create_user(
                User(username=username, email=email, password_hash="x")
            )
