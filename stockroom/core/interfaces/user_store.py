"""Abstract interface for user storage."""

from abc import ABC, abstractmethod

from stockroom.core.entities.user import User


class IUserStore(ABC):
    """Interface for user account persistence."""

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    async def get_user(self, user_id: int) -> User | None:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_users(self, user_ids: list[int]) -> dict[int, User]:
        """Get several users keyed by ID. Missing IDs are omitted."""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None:
        """Get user by username."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        pass

    @abstractmethod
    async def get_by_identifier(self, identifier: str) -> User | None:
        """Get user whose username or email matches the identifier."""
        pass

    @abstractmethod
    async def update_user(self, user: User) -> User:
        """Persist all mutable fields of a user."""
        pass
