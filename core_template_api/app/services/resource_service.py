"""
Generic resource service.

``ResourceService`` is the only place where request-shape rules live:
required fields, length and range rules, defaults, the update-id
policy and the translation of search terms and list filters into
query predicates.  One instance is built per resource kind; instances
hold no per-request state and are safe to share between threads.

Inputs may be pydantic models (as produced by the API layer) or plain
mappings.  Results are the kind's read schema, or a ``Page`` of them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from ..core.errors import Conflict, IdMismatch, InvalidArgument, NotFound, ValidationFailed
from ..schemas.common import Page
from .kinds import ResourceKind
from .query import ContainsIgnoreCase, EqualsIgnoreCase, PageRequest, Predicate, QueryEngine, ResultPage, Sort
from .store import EntityStore

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Mapping[str, Any]]


class ResourceService:
    """CRUD, search and pagination for one resource kind."""

    def __init__(self, kind: ResourceKind, store: EntityStore, engine: Optional[QueryEngine] = None) -> None:
        self.kind = kind
        self.store = store
        self.engine = engine or QueryEngine(store)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _payload(self, data: Optional[Payload], *, partial: bool) -> Dict[str, Any]:
        if data is None:
            raise InvalidArgument(f"{self.kind.label} payload must not be null")
        if isinstance(data, BaseModel):
            return data.model_dump(exclude_unset=partial)
        if isinstance(data, Mapping):
            return dict(data)
        raise InvalidArgument(f"Unsupported payload type: {type(data).__name__}")

    def _validate(self, record: Mapping[str, Any]) -> None:
        for spec in self.kind.fields:
            value = record.get(spec.name)
            if value is None or (isinstance(value, str) and not value.strip()):
                if spec.required:
                    raise ValidationFailed(spec.name, f"{spec.name} is required and cannot be empty")
                continue
            if spec.type == "integer":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValidationFailed(spec.name, f"{spec.name} must be an integer")
                if spec.min_value is not None and value < spec.min_value:
                    raise ValidationFailed(spec.name, f"{spec.name} must be at least {spec.min_value}")
                if spec.max_value is not None and value > spec.max_value:
                    raise ValidationFailed(spec.name, f"{spec.name} must be at most {spec.max_value}")
            elif spec.type == "boolean" and not isinstance(value, bool):
                raise ValidationFailed(spec.name, f"{spec.name} must be a boolean")
            elif spec.type == "text":
                if not isinstance(value, str):
                    raise ValidationFailed(spec.name, f"{spec.name} must be a string")
                if spec.max_length is not None and len(value) > spec.max_length:
                    raise ValidationFailed(
                        spec.name, f"{spec.name} must be {spec.max_length} characters or fewer"
                    )

    def _read(self, record: Mapping[str, Any]) -> BaseModel:
        return self.kind.read_schema.model_validate(record)

    def _page(self, result: ResultPage) -> Page:
        return Page[self.kind.read_schema](
            items=[self._read(item) for item in result.items],
            total_elements=result.total_elements,
            page=result.page,
            size=result.size,
        )

    def _filter_predicates(self, filters: Optional[Mapping[str, Any]]) -> List[Predicate]:
        predicates: List[Predicate] = []
        for name, value in (filters or {}).items():
            if value is None:
                continue
            build = self.kind.filters.get(name)
            if build is None:
                raise InvalidArgument(f"Unknown filter {name!r} for {self.kind.label.lower()}")
            predicates.append(build(value))
        return predicates

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def create(self, data: Optional[Payload]) -> BaseModel:
        """Validate and persist a new record.

        Any ``id`` or ``version`` in the payload is ignored; the store
        assigns both.  Missing optional fields take their declared
        defaults.
        """
        payload = self._payload(data, partial=False)
        record: Dict[str, Any] = {}
        for spec in self.kind.fields:
            value = payload.get(spec.name)
            record[spec.name] = spec.default_value() if value is None else value
        self._validate(record)
        stored = self.store.put(record)
        logger.info("Created %s %s", self.kind.name, stored["id"])
        return self._read(stored)

    def get(self, record_id: int) -> Optional[BaseModel]:
        record = self.store.get(record_id)
        if record is None:
            return None
        return self._read(record)

    def exists_by_id(self, record_id: int) -> bool:
        return self.store.exists(record_id)

    def list(self, page_request: Optional[PageRequest] = None, filters: Optional[Mapping[str, Any]] = None) -> Page:
        """Return one page of records, newest first unless sorted otherwise."""
        result = self.engine.run(
            self._filter_predicates(filters),
            page_request or PageRequest(),
            self.kind.default_sort,
        )
        return self._page(result)

    def list_active(self, page_request: Optional[PageRequest] = None) -> Page:
        return self.list(page_request, {"is_active": True})

    def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        return self.store.count_matching(self._filter_predicates(filters))

    def find_by_name(self, name: str) -> Optional[BaseModel]:
        """Case-insensitive exact lookup; the oldest match wins."""
        if not name or not name.strip():
            raise InvalidArgument("Name must not be blank")
        result = self.engine.run(
            [EqualsIgnoreCase("name", name.strip())],
            PageRequest(page=0, size=1, sort=Sort("id")),
            self.kind.default_sort,
        )
        if not result.items:
            return None
        return self._read(result.items[0])

    def search(
        self,
        term: Optional[str],
        page_request: Optional[PageRequest] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Page:
        """Case-insensitive substring search over the searchable fields.

        A blank term matches every record, so the call degrades to a
        filtered listing sorted by the kind's search sort.
        """
        predicates = self._filter_predicates(filters)
        if term and term.strip():
            predicates.append(ContainsIgnoreCase(self.kind.searchable, term.strip()))
        result = self.engine.run(
            predicates,
            page_request or PageRequest(),
            self.kind.search_sort,
            default_size=self.kind.search_page_size,
        )
        return self._page(result)

    def update(self, record_id: int, data: Optional[Payload]) -> BaseModel:
        """Apply the provided fields to an existing record.

        Fields absent from the payload keep their stored values.  The
        path id always wins; whether a differing body id is an error
        depends on ``kind.reject_id_mismatch``.  When the payload
        carries a ``version`` it must match the stored version.
        """
        changes = self._payload(data, partial=True)
        body_id = changes.pop("id", None)
        if body_id is not None and body_id != record_id:
            if self.kind.reject_id_mismatch:
                raise IdMismatch(f"Body id {body_id} does not match path id {record_id}")
            logger.debug("Ignoring body id %s for %s %s", body_id, self.kind.name, record_id)

        current = self.store.get(record_id)
        if current is None:
            raise NotFound(f"{self.kind.label} with id {record_id} not found")

        expected_version = changes.pop("version", None)
        merged = dict(current)
        for spec in self.kind.fields:
            if spec.name not in changes:
                continue
            value = changes[spec.name]
            # null resets flags to their default instead of clearing them
            if value is None and spec.default is not None:
                value = spec.default
            merged[spec.name] = value
        merged["id"] = record_id
        merged["version"] = current["version"] if expected_version is None else expected_version
        self._validate(merged)

        try:
            stored = self.store.put(merged)
        except Conflict:
            logger.warning(
                "Rejected stale update of %s %s (client version %s)",
                self.kind.name,
                record_id,
                merged["version"],
            )
            raise
        logger.info("Updated %s %s (version %s)", self.kind.name, record_id, stored["version"])
        return self._read(stored)

    def delete(self, record_id: int) -> None:
        """Delete a record; deleting an absent id raises ``NotFound``."""
        if not self.store.delete(record_id):
            raise NotFound(f"{self.kind.label} with id {record_id} not found")
        logger.info("Deleted %s %s", self.kind.name, record_id)
