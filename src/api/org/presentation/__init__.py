"""Organization presentation layer - aggregate-based organization.

Organizes presentation concerns by domain aggregate (groups, persons)
following vertical slicing and DDD principles. Each aggregate package
contains its own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from org.presentation.groups.routes import router as groups_router
from org.presentation.persons.routes import router as persons_router

router = APIRouter(prefix="/api")

router.include_router(groups_router)
router.include_router(persons_router)

__all__ = ["router"]
