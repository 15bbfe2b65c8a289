"""
User feedback endpoints for API v1.

Feedback entries carry a 1-5 rating, the submitting user's id and a
feedback date (defaulting to the time of creation).  Listings can be
narrowed by user, rating, resolution state and a ``since`` date.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Query

from core_template_api.app.services.kinds import USER_FEEDBACK
from .resources import build_resource_router


def user_feedback_filters(
    is_active: Optional[bool] = Query(None, description="Filter on the active flag"),
    user_id: Optional[int] = Query(None, description="Only feedback from this user"),
    is_resolved: Optional[bool] = Query(None),
    rating: Optional[int] = Query(None, ge=1, le=5),
    since: Optional[datetime] = Query(None, description="Only feedback dated at or after this time"),
) -> Dict[str, Any]:
    return {
        "is_active": is_active,
        "user_id": user_id,
        "is_resolved": is_resolved,
        "rating": rating,
        "since": since,
    }


router = build_resource_router(USER_FEEDBACK, user_feedback_filters)
