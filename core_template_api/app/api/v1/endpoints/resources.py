"""
Generic CRUD router shared by every resource kind.

``build_resource_router`` produces the same set of routes for any
``ResourceKind``: list, search, active listing, count, lookup by name,
get, create, update and delete.  Kind-specific list filters are
supplied as a FastAPI dependency returning a dict of filter values.

Service errors are translated into ``HTTPException`` here; the detail
payload always carries the error kind and a message.
"""

from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from core_template_api.app.core.errors import (
    Conflict,
    IdMismatch,
    InvalidArgument,
    NotFound,
    ResourceError,
    ValidationFailed,
)
from core_template_api.app.schemas.common import Page
from core_template_api.app.services.kinds import ResourceKind
from core_template_api.app.services.query import PageRequest, Sort
from core_template_api.app.services.resource_service import ResourceService

_STATUS_CODES = {
    InvalidArgument: status.HTTP_400_BAD_REQUEST,
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
    IdMismatch: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
}


def to_http_exception(exc: ResourceError) -> HTTPException:
    status_code = _STATUS_CODES.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=exc.to_detail())


def page_request(
    page: int = Query(0, ge=0, description="Page number (0-based)"),
    size: Optional[int] = Query(None, ge=1, description="Number of items per page"),
    sort: Optional[str] = Query(None, description="Field to sort by, e.g. created_at,desc"),
) -> PageRequest:
    try:
        return PageRequest(page=page, size=size, sort=Sort.parse(sort))
    except ResourceError as e:
        raise to_http_exception(e)


def build_resource_router(
    kind: ResourceKind,
    filters_dependency: Callable[..., Dict[str, Any]],
) -> APIRouter:
    """Build the CRUD router for one resource kind."""
    router = APIRouter()
    read_schema = kind.read_schema
    create_schema = kind.create_schema
    update_schema = kind.update_schema
    page_schema = Page[read_schema]
    label = kind.label

    def get_service(request: Request) -> ResourceService:
        return request.app.state.services[kind.name]

    @router.get("/", response_model=page_schema, summary=f"List {label.lower()} records")
    def list_records(
        paging: PageRequest = Depends(page_request),
        filters: Dict[str, Any] = Depends(filters_dependency),
        service: ResourceService = Depends(get_service),
    ):
        """Return a page of records, newest first unless ``sort`` says otherwise."""
        try:
            return service.list(paging, filters)
        except ResourceError as e:
            raise to_http_exception(e)

    @router.get("/search", response_model=page_schema, summary=f"Search {label.lower()} records")
    def search_records(
        query: str = Query("", max_length=200, description="Case-insensitive search term"),
        paging: PageRequest = Depends(page_request),
        filters: Dict[str, Any] = Depends(filters_dependency),
        service: ResourceService = Depends(get_service),
    ):
        """Substring search over the kind's searchable fields, sorted by name."""
        try:
            return service.search(query, paging, filters)
        except ResourceError as e:
            raise to_http_exception(e)

    @router.get("/active", response_model=page_schema, summary=f"List active {label.lower()} records")
    def list_active_records(
        paging: PageRequest = Depends(page_request),
        service: ResourceService = Depends(get_service),
    ):
        try:
            return service.list_active(paging)
        except ResourceError as e:
            raise to_http_exception(e)

    @router.get("/count", summary=f"Count {label.lower()} records")
    def count_records(
        filters: Dict[str, Any] = Depends(filters_dependency),
        service: ResourceService = Depends(get_service),
    ) -> Dict[str, int]:
        try:
            return {"count": service.count(filters)}
        except ResourceError as e:
            raise to_http_exception(e)

    @router.get("/by-name/{name}", response_model=read_schema, summary=f"Find a {label.lower()} by name")
    def get_record_by_name(name: str, service: ResourceService = Depends(get_service)):
        """Case-insensitive exact name lookup.  Returns 404 when nothing matches."""
        try:
            record = service.find_by_name(name)
        except ResourceError as e:
            raise to_http_exception(e)
        if record is None:
            raise to_http_exception(NotFound(f"{label} named {name!r} not found"))
        return record

    @router.get("/{record_id}", response_model=read_schema, summary=f"Get a {label.lower()} by id")
    def get_record(record_id: int, service: ResourceService = Depends(get_service)):
        record = service.get(record_id)
        if record is None:
            raise to_http_exception(NotFound(f"{label} with id {record_id} not found"))
        return record

    @router.post(
        "/",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {label.lower()}",
    )
    def create_record(payload: create_schema, service: ResourceService = Depends(get_service)):
        try:
            return service.create(payload)
        except ResourceError as e:
            raise to_http_exception(e)

    @router.put("/{record_id}", response_model=read_schema, summary=f"Update a {label.lower()}")
    def update_record(
        record_id: int,
        payload: update_schema,
        service: ResourceService = Depends(get_service),
    ):
        """Update the provided fields.  Send ``version`` to guard against lost updates."""
        try:
            return service.update(record_id, payload)
        except ResourceError as e:
            raise to_http_exception(e)

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete a {label.lower()}")
    def delete_record(record_id: int, service: ResourceService = Depends(get_service)) -> None:
        try:
            service.delete(record_id)
        except ResourceError as e:
            raise to_http_exception(e)
        return None

    return router
