"""
Configuration validation endpoints for API v1.

Configuration validations describe a named rule together with retry
and timeout limits and a free-form ``dynamic_config`` object.  The
list, search and count routes accept ``is_active`` and
``enabled_for_production`` filters.
"""

from typing import Any, Dict, Optional

from fastapi import Query

from core_template_api.app.services.kinds import CONFIGURATION_VALIDATION
from .resources import build_resource_router


def configuration_validation_filters(
    is_active: Optional[bool] = Query(None, description="Filter on the active flag"),
    enabled_for_production: Optional[bool] = Query(None, description="Filter on production enablement"),
) -> Dict[str, Any]:
    return {"is_active": is_active, "enabled_for_production": enabled_for_production}


router = build_resource_router(CONFIGURATION_VALIDATION, configuration_validation_filters)
