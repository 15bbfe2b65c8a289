# tests/conftest.py
"""
Shared fixtures.  Every test gets its own SQLite file under ``tmp_path``
with all migrations applied.
"""
import pytest
from fastapi.testclient import TestClient

from core_template_api.app.core.db import init_db
from core_template_api.app.main import create_app
from core_template_api.app.services.registry import build_services


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "test_core_template.db")
    init_db(path)
    return path


@pytest.fixture
def services(db_path):
    return build_services(db_path)


@pytest.fixture
def client(db_path):
    with TestClient(create_app(db_path)) as test_client:
        yield test_client
