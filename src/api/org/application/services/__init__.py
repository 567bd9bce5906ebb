"""Application services for the organization bounded context."""

from org.application.services.group_service import GroupService
from org.application.services.person_service import PersonService
from org.application.services.subtree_query_service import SubtreeQueryService

__all__ = ["GroupService", "PersonService", "SubtreeQueryService"]
