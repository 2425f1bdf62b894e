"""User account entities."""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Account role."""

    USER = "user"
    ADMIN = "admin"


class NotificationPreferences(BaseModel):
    """Which notifications a user wants."""

    email: bool = True
    low_stock: bool = True
    stock_out: bool = True


class UserPreferences(BaseModel):
    """Dashboard and notification preferences."""

    theme: Literal["light", "dark", "system"] = "system"
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)
    dashboard_layout: Literal["default", "compact", "detailed"] = "default"
    language: str = "en"


class User(BaseModel):
    """A registered account. ``password_hash`` never leaves the service."""

    id: int | None = None
    username: str
    email: str
    password_hash: str
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole = UserRole.USER
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    last_login: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
