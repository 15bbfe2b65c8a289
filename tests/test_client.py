# tests/test_client.py
"""
Tests for the requests based API client, using a fake session.
"""
import json

import requests

from core_template_client import CoreTemplateAPI


def _response(status_code, body=None, url="http://api"):
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response._content = b"" if body is None else json.dumps(body).encode()
    return response


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def test_create_posts_json_to_kind_path():
    session = FakeSession(_response(201, {"id": 1, "name": "Top"}))
    api = CoreTemplateAPI(base_url="http://localhost:8000/", session=session)
    data, error = api.recommenders.create({"name": "Top"})
    assert error is None
    assert data == {"id": 1, "name": "Top"}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://localhost:8000/api/v1/recommender/"
    assert call["json"] == {"name": "Top"}


def test_list_sends_paging_and_drops_empty_filters():
    session = FakeSession(_response(200, {"items": [], "totalElements": 0, "page": 2, "size": 5}))
    api = CoreTemplateAPI(base_url="http://api", session=session)
    data, error = api.user_feedback.list(page=2, size=5, sort="rating,desc", user_id=3, is_resolved=None)
    assert error is None
    assert data["page"] == 2
    assert session.calls[0]["params"] == {"page": 2, "size": 5, "sort": "rating,desc", "user_id": 3}


def test_http_errors_are_returned_not_raised():
    body = {"detail": {"error": "Conflict", "message": "stale version"}}
    session = FakeSession(_response(409, body))
    api = CoreTemplateAPI(base_url="http://api", session=session)
    data, error = api.database_integrations.update(5, {"version": 0, "name": "x"})
    assert data is None
    assert error == {"status_code": 409, "error": "Conflict", "message": "stale version"}


def test_transport_errors_are_returned():
    session = FakeSession(requests.ConnectionError("refused"))
    api = CoreTemplateAPI(base_url="http://api", session=session)
    data, error = api.configuration_validations.get(1)
    assert data is None
    assert error["status_code"] is None
    assert "refused" in error["message"]


def test_delete_and_count():
    session = FakeSession(_response(204), _response(200, {"count": 4}))
    api = CoreTemplateAPI(base_url="http://api", session=session)
    assert api.recommenders.delete(3) == (True, None)
    assert api.recommenders.count(is_active=True) == (4, None)
    assert session.calls[1]["params"] == {"is_active": True}


def test_by_name_quotes_the_name():
    session = FakeSession(_response(200, {"id": 1}))
    api = CoreTemplateAPI(base_url="http://api", session=session)
    api.recommenders.by_name("a/b c")
    assert session.calls[0]["url"] == "http://api/api/v1/recommender/by-name/a%2Fb%20c"
