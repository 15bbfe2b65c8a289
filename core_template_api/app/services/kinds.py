"""
Resource kind declarations.

Every resource kind is the same generic record shape plus a handful of
kind-specific fields.  A ``ResourceKind`` bundles everything the
generic store, query engine, service and router need to know about one
kind: its table and columns, field rules, schemas, searchable fields,
list filters, default sorts and the update-id policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel

from ..schemas.configuration_validation import (
    ConfigurationValidationCreate,
    ConfigurationValidationRead,
    ConfigurationValidationUpdate,
)
from ..schemas.database_integration import (
    DatabaseIntegrationCreate,
    DatabaseIntegrationRead,
    DatabaseIntegrationUpdate,
)
from ..schemas.recommender import RecommenderCreate, RecommenderRead, RecommenderUpdate
from ..schemas.user_feedback import UserFeedbackCreate, UserFeedbackRead, UserFeedbackUpdate
from .query import Equals, EqualsIgnoreCase, Flag, Predicate, Since, Sort


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FieldSpec:
    """One mutable column of a resource table.

    ``type`` is one of ``text``, ``integer``, ``boolean``, ``timestamp``
    or ``json`` and controls how values are encoded for SQLite.
    """

    name: str
    type: str = "text"
    required: bool = False
    default: Any = None
    default_factory: Optional[Callable[[], Any]] = None
    max_length: Optional[int] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    def default_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


BASE_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("name", required=True, max_length=100),
    FieldSpec("is_active", "boolean", default=False),
)


@dataclass(frozen=True)
class ResourceKind:
    name: str
    label: str
    table: str
    path: str
    fields: Tuple[FieldSpec, ...]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    read_schema: Type[BaseModel]
    searchable: Tuple[str, ...]
    filters: Mapping[str, Callable[[Any], Predicate]] = field(default_factory=dict)
    default_sort: Sort = Sort("created_at", descending=True)
    search_sort: Sort = Sort("name")
    search_page_size: Optional[int] = None
    # When True an update whose body id differs from the path id is
    # rejected; otherwise the path id silently wins.
    reject_id_mismatch: bool = False

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def spec(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)


def _active_filter(value: Any) -> Predicate:
    return Flag("is_active", bool(value))


CONFIGURATION_VALIDATION = ResourceKind(
    name="configuration_validation",
    label="Configuration validation",
    table="configuration_validations",
    path="/configuration-validation-utilities",
    fields=BASE_FIELDS
    + (
        FieldSpec("validation_rule"),
        FieldSpec("description"),
        FieldSpec("max_retries", "integer", min_value=0),
        FieldSpec("timeout_seconds", "integer", min_value=0),
        FieldSpec("enabled_for_production", "boolean", default=False),
        FieldSpec("dynamic_config", "json"),
    ),
    create_schema=ConfigurationValidationCreate,
    update_schema=ConfigurationValidationUpdate,
    read_schema=ConfigurationValidationRead,
    searchable=("name", "description", "validation_rule"),
    filters={
        "is_active": _active_filter,
        "enabled_for_production": lambda v: Flag("enabled_for_production", bool(v)),
    },
)

DATABASE_INTEGRATION = ResourceKind(
    name="database_integration",
    label="Database integration",
    table="database_integrations",
    path="/database-integration-vector-stores",
    fields=BASE_FIELDS
    + (
        FieldSpec("connection_string", required=True, max_length=500),
        FieldSpec("vector_store_type", required=True, max_length=50),
        FieldSpec("description"),
        FieldSpec("database_integration_id", "integer"),
        FieldSpec("metadata", "json"),
        FieldSpec("timeout_seconds", "integer", min_value=0),
        FieldSpec("max_retries", "integer", min_value=0),
        FieldSpec("is_encrypted", "boolean", default=False),
        FieldSpec("last_synced_at", "timestamp"),
        FieldSpec("status_message", max_length=255),
        FieldSpec("environment", max_length=50),
        FieldSpec("region", max_length=50),
        FieldSpec("tags", "json"),
    ),
    create_schema=DatabaseIntegrationCreate,
    update_schema=DatabaseIntegrationUpdate,
    read_schema=DatabaseIntegrationRead,
    searchable=("name", "vector_store_type", "description"),
    filters={
        "is_active": _active_filter,
        "vector_store_type": lambda v: EqualsIgnoreCase("vector_store_type", str(v)),
        "database_integration_id": lambda v: Equals("database_integration_id", int(v)),
        "environment": lambda v: EqualsIgnoreCase("environment", str(v)),
    },
    search_page_size=20,
)

RECOMMENDER = ResourceKind(
    name="recommender",
    label="Recommender",
    table="recommenders",
    path="/recommender",
    fields=BASE_FIELDS
    + (
        FieldSpec("description", max_length=500),
        FieldSpec("model_version", max_length=50),
    ),
    create_schema=RecommenderCreate,
    update_schema=RecommenderUpdate,
    read_schema=RecommenderRead,
    searchable=("name", "description", "model_version"),
    filters={
        "is_active": _active_filter,
        "model_version": lambda v: Equals("model_version", str(v)),
    },
    reject_id_mismatch=True,
)

USER_FEEDBACK = ResourceKind(
    name="user_feedback",
    label="User feedback",
    table="user_feedback",
    path="/user-feedback-module",
    fields=BASE_FIELDS
    + (
        FieldSpec("description", max_length=500),
        FieldSpec("rating", "integer", required=True, min_value=1, max_value=5),
        FieldSpec("feedback_date", "timestamp", required=True, default_factory=utcnow),
        FieldSpec("user_id", "integer", required=True),
        FieldSpec("is_resolved", "boolean", default=False),
    ),
    create_schema=UserFeedbackCreate,
    update_schema=UserFeedbackUpdate,
    read_schema=UserFeedbackRead,
    searchable=("name", "description"),
    filters={
        "is_active": _active_filter,
        "user_id": lambda v: Equals("user_id", int(v)),
        "is_resolved": lambda v: Flag("is_resolved", bool(v)),
        "rating": lambda v: Equals("rating", int(v)),
        "since": lambda v: Since("feedback_date", v),
    },
)

KINDS: Dict[str, ResourceKind] = {
    kind.name: kind
    for kind in (CONFIGURATION_VALIDATION, DATABASE_INTEGRATION, RECOMMENDER, USER_FEEDBACK)
}
