"""Infrastructure layer implementations."""

from stockroom.infrastructure import storage

__all__ = ["storage"]
