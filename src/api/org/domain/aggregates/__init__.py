"""Domain aggregates for the organization context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from org.domain.aggregates.group import Group
from org.domain.aggregates.person import PATCHABLE_FIELDS, Person

__all__ = [
    "Group",
    "PATCHABLE_FIELDS",
    "Person",
]
