"""Request-scoped credential passed explicitly to core operations."""

from dataclasses import dataclass

from stockroom.core.entities.user import UserRole


@dataclass(frozen=True)
class ActorContext:
    """The authenticated user on whose behalf an operation runs."""

    user_id: int
    username: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
