"""
Explicit wiring of stores, query engines and services.

``build_services`` is called once at process start (see ``main``) and
returns one ``ResourceService`` per resource kind, keyed by kind name.
"""

from typing import Dict, Optional

from ..core.config import settings
from .kinds import KINDS
from .query import QueryEngine
from .resource_service import ResourceService
from .store import EntityStore


def build_services(database_path: Optional[str] = None) -> Dict[str, ResourceService]:
    services: Dict[str, ResourceService] = {}
    for name, kind in KINDS.items():
        store = EntityStore(kind, database_path)
        engine = QueryEngine(
            store,
            max_page_size=settings.max_page_size,
            default_page_size=settings.default_page_size,
        )
        services[name] = ResourceService(kind, store, engine)
    return services
