"""
Top-level router for version 1 of the API.

This router aggregates the per-kind routers under a unified prefix.
Each kind is mounted at the path declared in its ``ResourceKind``.
"""

from fastapi import APIRouter

from core_template_api.app.services.kinds import (
    CONFIGURATION_VALIDATION,
    DATABASE_INTEGRATION,
    RECOMMENDER,
    USER_FEEDBACK,
)
from .endpoints import (
    configuration_validations,
    database_integrations,
    recommenders,
    user_feedback,
)

router = APIRouter()

router.include_router(
    configuration_validations.router,
    prefix=CONFIGURATION_VALIDATION.path,
    tags=["configuration-validation"],
)
router.include_router(
    database_integrations.router,
    prefix=DATABASE_INTEGRATION.path,
    tags=["database-integration"],
)
router.include_router(recommenders.router, prefix=RECOMMENDER.path, tags=["recommender"])
router.include_router(user_feedback.router, prefix=USER_FEEDBACK.path, tags=["user-feedback"])
