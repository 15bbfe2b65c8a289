# tests/test_logging_config.py
"""
Tests for logging setup.  Root logger state is saved and restored
around each test.
"""
import logging

import pytest

from core_template_api.app.core.logging_config import setup_logging

STORE_LOGGER = "core_template_api.app.services.store"


@pytest.fixture
def bare_root():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers = []
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_configures_root_only(bare_root, tmp_path):
    setup_logging("warning", str(tmp_path / "app.log"))
    assert bare_root.level == logging.WARNING
    assert len(bare_root.handlers) == 2
    assert logging.getLogger(STORE_LOGGER).level == logging.NOTSET


def test_setup_logging_runs_once(bare_root):
    setup_logging("INFO")
    setup_logging("DEBUG")
    assert len(bare_root.handlers) == 1
    assert bare_root.level == logging.INFO
