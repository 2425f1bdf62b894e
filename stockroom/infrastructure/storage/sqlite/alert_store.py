"""SQLite implementation of alert storage."""

from datetime import UTC, datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.alert import Alert, AlertStatus, AlertType
from stockroom.core.exceptions import ConflictError
from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)


class SQLiteAlertStore(SQLiteStore, IAlertStore):
    """SQLite implementation of stock alert storage."""

    async def create_alert(self, alert: Alert) -> Alert:
        """
        Create a new alert.

        Raises:
            ConflictError: the item already has an active alert
        """
        try:
            async with self._writing() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO alerts (
                        item_id, type, message, status, created_by, created_at, resolved_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        alert.item_id,
                        alert.type.value,
                        alert.message,
                        alert.status.value,
                        alert.created_by,
                        to_db_timestamp(alert.created_at),
                        to_db_timestamp(alert.resolved_at),
                    ),
                )
                alert.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            if "alerts.item_id" not in str(e):
                raise
            raise ConflictError(
                f"Item {alert.item_id} already has an active alert",
                details={"item_id": alert.item_id},
            ) from e

        logger.info(
            "alert_created",
            alert_id=alert.id,
            item_id=alert.item_id,
            type=alert.type.value,
        )
        return alert

    async def get_alert(self, alert_id: int) -> Alert | None:
        """Get alert by ID."""
        async with self._reading() as conn:
            cursor = await conn.execute("SELECT * FROM alerts WHERE id = ?", (alert_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_alert(row)

    async def get_active_alert(self, item_id: int) -> Alert | None:
        """Get the active alert for an item."""
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM alerts WHERE item_id = ? AND status = ?",
                (item_id, AlertStatus.ACTIVE.value),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_alert(row)

    async def update_alert(self, alert: Alert) -> Alert:
        """Persist status and resolution time."""
        async with self._writing() as conn:
            await conn.execute(
                "UPDATE alerts SET status = ?, resolved_at = ? WHERE id = ?",
                (alert.status.value, to_db_timestamp(alert.resolved_at), alert.id),
            )
        logger.debug("alert_updated", alert_id=alert.id, status=alert.status.value)
        return alert

    async def list_alerts(
        self,
        status: AlertStatus | None = None,
        item_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Alert]:
        """List alerts, newest first."""
        clauses: list[str] = []
        params: list = []
        if status is not None:
            clauses.append("status = ?")
            params.append(AlertStatus(status).value)
        if item_id is not None:
            clauses.append("item_id = ?")
            params.append(item_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.extend([limit, offset])

        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM alerts {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_alert(row) for row in rows]

    async def delete_for_item(self, item_id: int) -> int:
        async with self._writing() as conn:
            cursor = await conn.execute("DELETE FROM alerts WHERE item_id = ?", (item_id,))
            return cursor.rowcount

    @staticmethod
    def _row_to_alert(row: aiosqlite.Row) -> Alert:
        """Convert a database row to an Alert entity."""
        return Alert(
            id=row["id"],
            item_id=row["item_id"],
            type=AlertType(row["type"]),
            message=row["message"],
            status=AlertStatus(row["status"]),
            created_by=row["created_by"],
            created_at=from_db_timestamp(row["created_at"]) or datetime.now(UTC),
            resolved_at=from_db_timestamp(row["resolved_at"]),
        )
