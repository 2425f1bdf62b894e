"""Abstract interface for inventory item storage."""

from abc import ABC, abstractmethod

from stockroom.core.entities.inventory import InventoryItem, ItemStatus


# Fields list_items can sort by
ITEM_SORT_FIELDS = (
    "name",
    "category",
    "quantity",
    "unit_price",
    "reorder_point",
    "status",
    "created_at",
    "updated_at",
)


class IInventoryStore(ABC):
    """Interface for inventory item persistence."""

    @abstractmethod
    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        pass

    @abstractmethod
    async def get_items(self, item_ids: list[int]) -> dict[int, InventoryItem]:
        """Get several items keyed by ID. Missing IDs are omitted."""
        pass

    @abstractmethod
    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """Persist all mutable fields of an item."""
        pass

    @abstractmethod
    async def update_item_metadata(self, item: InventoryItem) -> InventoryItem:
        """
        Persist descriptive fields only, leaving quantity and last_restocked
        as stored. Status is recomputed from the stored quantity.
        """
        pass

    @abstractmethod
    async def delete_item(self, item_id: int) -> bool:
        """Delete an item. Returns False if it did not exist."""
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def count_items(
        self,
        search: str | None = None,
        category: str | None = None,
        status: ItemStatus | None = None,
    ) -> int:
        """Count items matching the same filters as list_items."""
        pass
