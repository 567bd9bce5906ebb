"""Domain-Oriented Observability for organization infrastructure.

Probes for repository operations following Domain-Oriented Observability patterns.
"""

from org.infrastructure.observability.repository_probe import (
    DefaultGroupRepositoryProbe,
    DefaultPersonRepositoryProbe,
    GroupRepositoryProbe,
    PersonRepositoryProbe,
)

__all__ = [
    "GroupRepositoryProbe",
    "DefaultGroupRepositoryProbe",
    "PersonRepositoryProbe",
    "DefaultPersonRepositoryProbe",
]
