"""Ports (interfaces) for the organization bounded context.

Ports define the contracts for repositories and the error taxonomy without
specifying implementation details. This allows for dependency inversion
and makes the domain layer independent of infrastructure.
"""

from org.ports.exceptions import (
    ConflictError,
    CycleError,
    InvariantError,
    NotFoundError,
    OrgError,
    ValidationError,
)
from org.ports.repositories import IGroupRepository, IPersonRepository

__all__ = [
    "ConflictError",
    "CycleError",
    "IGroupRepository",
    "IPersonRepository",
    "InvariantError",
    "NotFoundError",
    "OrgError",
    "ValidationError",
]
