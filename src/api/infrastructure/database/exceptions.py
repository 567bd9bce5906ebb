"""Database-specific exceptions shared by the infrastructure layer."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the database cannot be reached."""

    pass
