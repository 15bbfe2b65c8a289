# tests/test_store.py
"""
Tests for the SQLite entity store: system columns, versioned updates,
value encoding and deletes.
"""
import pytest

from core_template_api.app.core.errors import Conflict, InvalidArgument, NotFound
from core_template_api.app.services.kinds import DATABASE_INTEGRATION, RECOMMENDER
from core_template_api.app.services.query import Equals, Sort
from core_template_api.app.services.store import EntityStore


@pytest.fixture
def recommenders(db_path):
    return EntityStore(RECOMMENDER, db_path)


@pytest.fixture
def integrations(db_path):
    return EntityStore(DATABASE_INTEGRATION, db_path)


def test_insert_assigns_system_columns(recommenders):
    first = recommenders.put({"name": "alpha", "is_active": True})
    second = recommenders.put({"name": "beta", "is_active": False})
    assert first["id"] != second["id"]
    assert first["version"] == 0
    assert first["created_at"] == first["updated_at"]
    assert first["is_active"] is True
    assert second["is_active"] is False


def test_insert_ignores_caller_system_columns(recommenders):
    stored = recommenders.put({"name": "alpha", "is_active": False, "version": 42, "created_at": "1999-01-01"})
    assert stored["version"] == 0
    assert not stored["created_at"].startswith("1999")


def test_update_bumps_version_and_keeps_created_at(recommenders):
    stored = recommenders.put({"name": "alpha", "is_active": False})
    updated = recommenders.put(dict(stored, name="alpha 2"))
    assert updated["version"] == stored["version"] + 1
    assert updated["created_at"] == stored["created_at"]
    assert updated["updated_at"] >= stored["updated_at"]
    assert updated["name"] == "alpha 2"


def test_stale_version_conflicts(recommenders):
    stored = recommenders.put({"name": "alpha", "is_active": False})
    recommenders.put(dict(stored, name="first writer"))
    with pytest.raises(Conflict):
        recommenders.put(dict(stored, name="second writer"))
    assert recommenders.get(stored["id"])["name"] == "first writer"


def test_update_of_missing_record_raises(recommenders):
    with pytest.raises(NotFound):
        recommenders.put({"id": 999, "version": 0, "name": "ghost", "is_active": False})


def test_json_and_timestamp_columns_round_trip(integrations):
    stored = integrations.put(
        {
            "name": "vectors",
            "is_active": False,
            "connection_string": "postgresql://db/vectors",
            "vector_store_type": "pgvector",
            "metadata": {"dimensions": 1536, "metric": "cosine"},
            "tags": ["prod", "eu"],
            "last_synced_at": "2024-05-01T10:00:00Z",
            "is_encrypted": True,
        }
    )
    fetched = integrations.get(stored["id"])
    assert fetched["metadata"] == {"dimensions": 1536, "metric": "cosine"}
    assert fetched["tags"] == ["prod", "eu"]
    assert fetched["last_synced_at"] == "2024-05-01T10:00:00.000000+00:00"
    assert fetched["is_encrypted"] is True


def test_delete_and_exists(recommenders):
    stored = recommenders.put({"name": "alpha", "is_active": False})
    assert recommenders.exists(stored["id"])
    assert recommenders.delete(stored["id"]) is True
    assert recommenders.get(stored["id"]) is None
    assert not recommenders.exists(stored["id"])
    assert recommenders.delete(stored["id"]) is False


def test_count_and_scan_with_predicates(recommenders):
    for name, version in [("a", "v1"), ("b", "v2"), ("c", "v1")]:
        recommenders.put({"name": name, "is_active": False, "model_version": version})
    predicates = [Equals("model_version", "v1")]
    assert recommenders.count_matching(predicates) == 2
    rows = recommenders.scan(predicates, Sort("name", True), offset=0, limit=10)
    assert [row["name"] for row in rows] == ["c", "a"]


def test_unknown_columns_are_rejected(recommenders):
    with pytest.raises(InvalidArgument):
        recommenders.count_matching([Equals("name; DROP TABLE recommenders", 1)])
    with pytest.raises(InvalidArgument):
        recommenders.scan([], Sort("nope"), offset=0, limit=1)
