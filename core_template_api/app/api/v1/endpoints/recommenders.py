"""
Recommender endpoints for API v1.

Recommenders expose the shared CRUD surface.  Updates are strict about
ids: a body ``id`` that differs from the path id is rejected with 400.
"""

from typing import Any, Dict, Optional

from fastapi import Query

from core_template_api.app.services.kinds import RECOMMENDER
from .resources import build_resource_router


def recommender_filters(
    is_active: Optional[bool] = Query(None, description="Filter on the active flag"),
    model_version: Optional[str] = Query(None, max_length=50),
) -> Dict[str, Any]:
    return {"is_active": is_active, "model_version": model_version}


router = build_resource_router(RECOMMENDER, recommender_filters)
