"""Abstract interface for alert storage."""

from abc import ABC, abstractmethod

from stockroom.core.entities.alert import Alert, AlertStatus


class IAlertStore(ABC):
    """Interface for stock alert persistence."""

    @abstractmethod
    async def create_alert(self, alert: Alert) -> Alert:
        """Create a new alert."""
        pass

    @abstractmethod
    async def get_alert(self, alert_id: int) -> Alert | None:
        """Get alert by ID."""
        pass

    @abstractmethod
    async def get_active_alert(self, item_id: int) -> Alert | None:
        """Get the active alert for an item, if any."""
        pass

    @abstractmethod
    async def update_alert(self, alert: Alert) -> Alert:
        """Persist status and resolution time of an alert."""
        pass

    @abstractmethod
    async def list_alerts(
        self,
        status: AlertStatus | None = None,
        item_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Alert]:
        """List alerts, newest first."""
        pass

    @abstractmethod
    async def delete_for_item(self, item_id: int) -> int:
        """Delete all alerts of an item. Returns the number deleted."""
        pass
