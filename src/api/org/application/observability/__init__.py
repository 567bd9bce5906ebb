"""Domain-Oriented Observability for the organization application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from org.application.observability.group_service_probe import (
    DefaultGroupServiceProbe,
    GroupServiceProbe,
)
from org.application.observability.person_service_probe import (
    DefaultPersonServiceProbe,
    PersonServiceProbe,
)
from org.application.observability.subtree_query_probe import (
    DefaultSubtreeQueryProbe,
    SubtreeQueryProbe,
)

__all__ = [
    "DefaultGroupServiceProbe",
    "DefaultPersonServiceProbe",
    "DefaultSubtreeQueryProbe",
    "GroupServiceProbe",
    "PersonServiceProbe",
    "SubtreeQueryProbe",
]
