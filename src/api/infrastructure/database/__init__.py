"""Database infrastructure - shared engine and session primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
)
from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "DatabaseConnectionError",
    "DatabaseError",
    "TimestampMixin",
]
