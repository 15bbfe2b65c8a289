# tests/test_endpoints.py
"""
HTTP level tests for the resource routers.
"""
import pytest

RECOMMENDERS = "/api/v1/recommender"
FEEDBACK = "/api/v1/user-feedback-module"
INTEGRATIONS = "/api/v1/database-integration-vector-stores"
VALIDATIONS = "/api/v1/configuration-validation-utilities"


def _create(client, base, payload):
    r = client.post(f"{base}/", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.parametrize(
    "base,payload",
    [
        (RECOMMENDERS, {"name": "Top sellers", "model_version": "v3"}),
        (FEEDBACK, {"name": "Nice", "rating": 4, "user_id": 9}),
        (INTEGRATIONS, {"name": "vec", "connection_string": "qdrant://x", "vector_store_type": "qdrant"}),
        (VALIDATIONS, {"name": "Port", "validation_rule": "1-65535", "dynamic_config": {"min": 1}}),
    ],
)
def test_create_and_get_every_kind(client, base, payload):
    created = _create(client, base, payload)
    assert created["version"] == 0
    assert created["is_active"] is False
    for key, value in payload.items():
        assert created[key] == value
    r = client.get(f"{base}/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created


def test_get_missing_is_404(client):
    r = client.get(f"{RECOMMENDERS}/4242")
    assert r.status_code == 404
    assert r.json()["detail"]["error"] == "NotFound"


def test_missing_required_field_is_400(client):
    r = client.post(f"{FEEDBACK}/", json={"name": "no rating", "user_id": 1})
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["error"] == "ValidationFailed"
    assert detail["field"] == "rating"


def test_blank_name_is_400(client):
    r = client.post(f"{RECOMMENDERS}/", json={"name": "   "})
    assert r.status_code == 400
    assert r.json()["detail"] == {
        "error": "ValidationFailed",
        "message": "name is required and cannot be empty",
        "field": "name",
    }


def test_rating_out_of_range_is_400(client):
    r = client.post(f"{FEEDBACK}/", json={"name": "too good", "rating": 6, "user_id": 1})
    assert r.status_code == 400


def test_update_and_conflict(client):
    created = _create(client, RECOMMENDERS, {"name": "shared"})
    url = f"{RECOMMENDERS}/{created['id']}"
    r = client.put(url, json={"version": created["version"], "description": "first"})
    assert r.status_code == 200
    assert r.json()["version"] == created["version"] + 1
    assert r.json()["name"] == "shared"
    r = client.put(url, json={"version": created["version"], "description": "second"})
    assert r.status_code == 409
    assert r.json()["detail"]["error"] == "Conflict"
    assert client.get(url).json()["description"] == "first"


def test_recommender_id_mismatch_is_400(client):
    created = _create(client, RECOMMENDERS, {"name": "strict"})
    r = client.put(f"{RECOMMENDERS}/{created['id']}", json={"id": created["id"] + 1, "name": "x"})
    assert r.status_code == 400
    assert r.json()["detail"]["error"] == "IdMismatch"


def test_feedback_path_id_wins(client):
    created = _create(client, FEEDBACK, {"name": "ok", "rating": 3, "user_id": 1})
    r = client.put(f"{FEEDBACK}/{created['id']}", json={"id": 999, "rating": 5})
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]
    assert r.json()["rating"] == 5


def test_update_missing_is_404(client):
    r = client.put(f"{RECOMMENDERS}/777", json={"name": "ghost"})
    assert r.status_code == 404


def test_delete(client):
    created = _create(client, VALIDATIONS, {"name": "temp"})
    url = f"{VALIDATIONS}/{created['id']}"
    assert client.delete(url).status_code == 204
    assert client.get(url).status_code == 404
    assert client.delete(url).status_code == 404


def test_list_page_shape_and_sort(client):
    for name in ["c", "a", "b"]:
        _create(client, RECOMMENDERS, {"name": name})
    r = client.get(f"{RECOMMENDERS}/", params={"page": 0, "size": 2, "sort": "name,asc"})
    assert r.status_code == 200
    body = r.json()
    assert body["totalElements"] == 3
    assert body["page"] == 0
    assert body["size"] == 2
    assert [item["name"] for item in body["items"]] == ["a", "b"]
    r = client.get(f"{RECOMMENDERS}/", params={"page": 1, "size": 2, "sort": "name,asc"})
    assert [item["name"] for item in r.json()["items"]] == ["c"]


def test_oversized_page_is_clamped(client):
    _create(client, RECOMMENDERS, {"name": "one"})
    r = client.get(f"{RECOMMENDERS}/", params={"size": 1000})
    assert r.status_code == 200
    assert r.json()["size"] == 100


@pytest.mark.parametrize("params", [{"page": -1}, {"size": 0}, {"sort": "name,upwards"}])
def test_bad_paging_is_400(client, params):
    r = client.get(f"{RECOMMENDERS}/", params=params)
    assert r.status_code == 400


def test_search_endpoint(client):
    _create(client, INTEGRATIONS, {"name": "Orders", "connection_string": "pg://o", "vector_store_type": "pgvector"})
    _create(client, INTEGRATIONS, {"name": "Docs", "connection_string": "q://d", "vector_store_type": "Qdrant"})
    r = client.get(f"{INTEGRATIONS}/search", params={"query": "QDRANT"})
    assert r.status_code == 200
    body = r.json()
    assert body["totalElements"] == 1
    assert body["size"] == 20
    assert body["items"][0]["name"] == "Docs"


def test_active_count_and_by_name(client):
    _create(client, FEEDBACK, {"name": "Loved it", "rating": 5, "user_id": 1, "is_active": True})
    _create(client, FEEDBACK, {"name": "Meh", "rating": 2, "user_id": 2})
    active = client.get(f"{FEEDBACK}/active").json()
    assert [item["name"] for item in active["items"]] == ["Loved it"]
    assert client.get(f"{FEEDBACK}/count").json() == {"count": 2}
    assert client.get(f"{FEEDBACK}/count", params={"user_id": 2}).json() == {"count": 1}
    r = client.get(f"{FEEDBACK}/by-name/loved it")
    assert r.status_code == 200
    assert r.json()["rating"] == 5
    assert client.get(f"{FEEDBACK}/by-name/unknown").status_code == 404


def test_list_filters(client):
    _create(client, VALIDATIONS, {"name": "prod rule", "enabled_for_production": True})
    _create(client, VALIDATIONS, {"name": "dev rule"})
    r = client.get(f"{VALIDATIONS}/", params={"enabled_for_production": "true"})
    assert [item["name"] for item in r.json()["items"]] == ["prod rule"]


def test_by_name_and_search_with_accented_names(client):
    created = _create(client, RECOMMENDERS, {"name": "Émile"})
    r = client.get(f"{RECOMMENDERS}/by-name/ÉMILE")
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]
    body = client.get(f"{RECOMMENDERS}/search", params={"query": "émi"}).json()
    assert body["totalElements"] == 1


def test_app_state_holds_one_service_per_kind(client):
    assert set(client.app.state.services) == {
        "configuration_validation",
        "database_integration",
        "recommender",
        "user_feedback",
    }
    assert not hasattr(client.app.state, "database_path")
