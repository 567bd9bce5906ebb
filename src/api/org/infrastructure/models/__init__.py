"""SQLAlchemy ORM models for the organization bounded context.

These models map to database tables and are used by repository implementations.
"""

from org.infrastructure.models.group import GroupModel
from org.infrastructure.models.person import PersonModel

__all__ = [
    "GroupModel",
    "PersonModel",
]
