"""SQLite implementation of inventory storage."""

import json
from datetime import UTC, datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.inventory import InventoryItem, ItemStatus
from stockroom.core.exceptions import ItemNotFoundError
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)

# Whitelisted ORDER BY columns
SORTABLE_COLUMNS = {
    "name": "name COLLATE NOCASE",
    "category": "category COLLATE NOCASE",
    "quantity": "quantity",
    "unit_price": "unit_price",
    "reorder_point": "reorder_point",
    "status": "status",
    "created_at": "created_at",
    "updated_at": "updated_at",
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _build_filters(
    search: str | None,
    category: str | None,
    status: ItemStatus | None,
) -> tuple[str, list]:
    clauses: list[str] = []
    params: list = []

    if search:
        pattern = f"%{_escape_like(search.strip())}%"
        clauses.append(
            "(name LIKE ? ESCAPE '\\' OR COALESCE(description, '') LIKE ? ESCAPE '\\')"
        )
        params.extend([pattern, pattern])
    if category:
        clauses.append("category = ?")
        params.append(category)
    if status:
        clauses.append("status = ?")
        params.append(ItemStatus(status).value)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class SQLiteInventoryStore(SQLiteStore, IInventoryStore):
    """SQLite implementation of inventory item storage."""

    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        now = datetime.now(UTC)
        item.created_at = now
        item.updated_at = now
        item.refresh_status()
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_items (
                    name, description, category, quantity, reorder_point,
                    unit_price, status, tags, location, supplier,
                    last_restocked, created_by, updated_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.name,
                    item.description,
                    item.category,
                    item.quantity,
                    item.reorder_point,
                    item.unit_price,
                    item.status.value,
                    json.dumps(item.tags),
                    item.location,
                    item.supplier,
                    to_db_timestamp(item.last_restocked),
                    item.created_by,
                    item.updated_by,
                    to_db_timestamp(item.created_at),
                    to_db_timestamp(item.updated_at),
                ),
            )
            item.id = cursor.lastrowid
        logger.info("inventory_item_created", item_id=item.id, name=item.name)
        return item

    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def get_items(self, item_ids: list[int]) -> dict[int, InventoryItem]:
        """Get several items keyed by ID."""
        if not item_ids:
            return {}
        placeholders = ", ".join("?" for _ in item_ids)
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_items WHERE id IN ({placeholders})",
                list(item_ids),
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_item(row) for row in rows}

    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """Persist all mutable fields, recomputing status first."""
        item.refresh_status()
        async with self._writing() as conn:
            await conn.execute(
                """
                UPDATE inventory_items SET
                    name = ?,
                    description = ?,
                    category = ?,
                    quantity = ?,
                    reorder_point = ?,
                    unit_price = ?,
                    status = ?,
                    tags = ?,
                    location = ?,
                    supplier = ?,
                    last_restocked = ?,
                    updated_by = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    item.name,
                    item.description,
                    item.category,
                    item.quantity,
                    item.reorder_point,
                    item.unit_price,
                    item.status.value,
                    json.dumps(item.tags),
                    item.location,
                    item.supplier,
                    to_db_timestamp(item.last_restocked),
                    item.updated_by,
                    to_db_timestamp(item.updated_at),
                    item.id,
                ),
            )
        logger.debug("inventory_item_updated", item_id=item.id, quantity=item.quantity)
        return item

    async def update_item_metadata(self, item: InventoryItem) -> InventoryItem:
        """Persist descriptive fields; quantity stays whatever the row holds."""
        async with self._writing() as conn:
            await conn.execute(
                """
                UPDATE inventory_items SET
                    name = ?,
                    description = ?,
                    category = ?,
                    reorder_point = ?,
                    unit_price = ?,
                    status = CASE
                        WHEN quantity <= 0 THEN ?
                        WHEN quantity <= ? THEN ?
                        ELSE ?
                    END,
                    tags = ?,
                    location = ?,
                    supplier = ?,
                    updated_by = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    item.name,
                    item.description,
                    item.category,
                    item.reorder_point,
                    item.unit_price,
                    ItemStatus.OUT_OF_STOCK.value,
                    item.reorder_point,
                    ItemStatus.LOW_STOCK.value,
                    ItemStatus.IN_STOCK.value,
                    json.dumps(item.tags),
                    item.location,
                    item.supplier,
                    item.updated_by,
                    to_db_timestamp(item.updated_at),
                    item.id,
                ),
            )
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item.id,)
            )
            row = await cursor.fetchone()
        if row is None:
            raise ItemNotFoundError(item.id)
        logger.debug("inventory_item_metadata_updated", item_id=item.id)
        return self._row_to_item(row)

    async def delete_item(self, item_id: int) -> bool:
        """Delete an item row."""
        async with self._writing() as conn:
            cursor = await conn.execute(
                "DELETE FROM inventory_items WHERE id = ?", (item_id,)
            )
            return cursor.rowcount > 0

    async def list_items(
        self,
        search: str | None = None,
        category: str | None = None,
        status: ItemStatus | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[InventoryItem]:
        """List items with filtering, sorting and pagination."""
        where, params = _build_filters(search, category, status)
        column = SORTABLE_COLUMNS.get(sort_by, SORTABLE_COLUMNS["name"])
        direction = "DESC" if sort_order.lower() == "desc" else "ASC"

        sql = f"SELECT * FROM inventory_items {where} ORDER BY {column} {direction}, id {direction}"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        async with self._reading() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def count_items(
        self,
        search: str | None = None,
        category: str | None = None,
        status: ItemStatus | None = None,
    ) -> int:
        where, params = _build_filters(search, category, status)
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM inventory_items {where}", params
            )
            row = await cursor.fetchone()
            return row[0] if row else 0

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> InventoryItem:
        """Convert a database row to an InventoryItem entity."""
        try:
            tags = json.loads(row["tags"] or "[]")
        except (json.JSONDecodeError, TypeError):
            tags = []

        return InventoryItem(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            category=row["category"],
            quantity=row["quantity"],
            reorder_point=row["reorder_point"],
            unit_price=float(row["unit_price"]),
            tags=tags,
            location=row["location"],
            supplier=row["supplier"],
            last_restocked=from_db_timestamp(row["last_restocked"]),
            created_by=row["created_by"],
            updated_by=row["updated_by"],
            created_at=from_db_timestamp(row["created_at"]) or datetime.now(UTC),
            updated_at=from_db_timestamp(row["updated_at"]) or datetime.now(UTC),
        )
