"""Core Template API client.

A thin ``requests`` based wrapper around the REST API served by
``core_template_api``.  Every resource kind gets a :class:`ResourceClient`
exposing the same operations as the HTTP surface:

* :meth:`ResourceClient.list` - one page of records.
* :meth:`ResourceClient.search` - substring search over searchable fields.
* :meth:`ResourceClient.active` - one page of active records.
* :meth:`ResourceClient.count` - number of records matching the filters.
* :meth:`ResourceClient.get` / :meth:`ResourceClient.by_name` - single lookups.
* :meth:`ResourceClient.create`, :meth:`ResourceClient.update` and
  :meth:`ResourceClient.delete` - writes.

Calls never raise for HTTP or transport failures.  They return a tuple
``(data, error)`` where ``error`` is ``None`` on success and otherwise a
dictionary with ``status_code``, ``error`` and ``message`` keys.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]

# Resource attribute name -> path below /api/v1
RESOURCE_PATHS: Dict[str, str] = {
    "configuration_validations": "/configuration-validation-utilities",
    "database_integrations": "/database-integration-vector-stores",
    "recommenders": "/recommender",
    "user_feedback": "/user-feedback-module",
}


def _page_params(page: int, size: Optional[int], sort: Optional[str], filters: Dict[str, Any]) -> Dict[str, Any]:
    params: Dict[str, Any] = {"page": page}
    if size is not None:
        params["size"] = size
    if sort:
        params["sort"] = sort
    params.update({key: value for key, value in filters.items() if value is not None})
    return params


class ResourceClient:
    """Operations for one resource kind."""

    def __init__(self, api: "CoreTemplateAPI", path: str) -> None:
        self.api = api
        self.path = path.rstrip("/")

    def list(self, page: int = 0, size: Optional[int] = None, sort: Optional[str] = None, **filters: Any) -> Result:
        return self.api._request("GET", f"{self.path}/", params=_page_params(page, size, sort, filters))

    def search(
        self,
        query: str,
        page: int = 0,
        size: Optional[int] = None,
        sort: Optional[str] = None,
        **filters: Any,
    ) -> Result:
        params = _page_params(page, size, sort, filters)
        params["query"] = query
        return self.api._request("GET", f"{self.path}/search", params=params)

    def active(self, page: int = 0, size: Optional[int] = None, sort: Optional[str] = None) -> Result:
        return self.api._request("GET", f"{self.path}/active", params=_page_params(page, size, sort, {}))

    def count(self, **filters: Any) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
        params = {key: value for key, value in filters.items() if value is not None}
        data, error = self.api._request("GET", f"{self.path}/count", params=params)
        if error:
            return None, error
        return data.get("count") if isinstance(data, dict) else None, None

    def get(self, record_id: Any) -> Result:
        return self.api._request("GET", f"{self.path}/{record_id}")

    def by_name(self, name: str) -> Result:
        return self.api._request("GET", f"{self.path}/by-name/{quote(name, safe='')}")

    def create(self, payload: Dict[str, Any]) -> Result:
        return self.api._request("POST", f"{self.path}/", json_body=payload)

    def update(self, record_id: Any, payload: Dict[str, Any]) -> Result:
        """Update a record.  Include ``version`` in ``payload`` to detect concurrent edits."""
        return self.api._request("PUT", f"{self.path}/{record_id}", json_body=payload)

    def delete(self, record_id: Any) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self.api._request("DELETE", f"{self.path}/{record_id}")
        return error is None, error


class CoreTemplateAPI:
    """Client for the Core Template API.

    Example::

        api = CoreTemplateAPI(base_url="http://localhost:8000")
        created, error = api.recommenders.create({"name": "Top sellers"})
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_prefix: str = "/api/v1",
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") + api_prefix.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.configuration_validations = ResourceClient(self, RESOURCE_PATHS["configuration_validations"])
        self.database_integrations = ResourceClient(self, RESOURCE_PATHS["database_integrations"])
        self.recommenders = ResourceClient(self, RESOURCE_PATHS["recommenders"])
        self.user_feedback = ResourceClient(self, RESOURCE_PATHS["user_feedback"])

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
    ) -> Result:
        """Perform an HTTP request and return ``(data, error)``."""
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._http_error(exc)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "error": None, "message": str(exc)}

    @staticmethod
    def _http_error(exc: requests.HTTPError) -> Dict[str, Any]:
        response = exc.response
        status = response.status_code if response is not None else None
        error_kind = None
        message = ""
        if response is not None:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            if isinstance(detail, dict):
                error_kind = detail.get("error")
                message = detail.get("message") or ""
            elif detail:
                message = str(detail)
        if not message:
            message = str(exc)
        logger.error("API request failed (%s): %s", status, message)
        return {"status_code": status, "error": error_kind, "message": message}
