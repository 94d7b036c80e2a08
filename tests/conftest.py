"""
Global pytest configuration and fixtures.
"""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_connection_env(monkeypatch):
    """Remove Elasticsearch and esconn variables so defaults resolve predictably.

    Tests that exercise environment defaults set the variables they need
    through monkeypatch themselves.
    """
    for name in list(os.environ):
        if name.startswith(("ELASTICSEARCH_", "ESCONN_")):
            monkeypatch.delenv(name, raising=False)
    yield
