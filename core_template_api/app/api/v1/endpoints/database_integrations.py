"""
Database integration / vector store endpoints for API v1.

An integration holds a connection string and a vector store type plus
operational metadata (timeouts, tags, last sync time).  Search results
default to pages of 20.  ``vector_store_type`` and ``environment``
filters compare case-insensitively.
"""

from typing import Any, Dict, Optional

from fastapi import Query

from core_template_api.app.services.kinds import DATABASE_INTEGRATION
from .resources import build_resource_router


def database_integration_filters(
    is_active: Optional[bool] = Query(None, description="Filter on the active flag"),
    vector_store_type: Optional[str] = Query(None, max_length=50),
    database_integration_id: Optional[int] = Query(None, description="Related integration id"),
    environment: Optional[str] = Query(None, max_length=50),
) -> Dict[str, Any]:
    return {
        "is_active": is_active,
        "vector_store_type": vector_store_type,
        "database_integration_id": database_integration_id,
        "environment": environment,
    }


router = build_resource_router(DATABASE_INTEGRATION, database_integration_filters)
