import asyncio

import pytest
from fastapi.testclient import TestClient

from locallibrary.api import create_app
from locallibrary.database import DocumentStore


@pytest.fixture
def store(tmp_path, request):
    # A separate database file per test
    db_file = str(tmp_path / f"test_{request.node.name}.db")
    store = DocumentStore(db_file)
    store.initialize()
    return store


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


@pytest.fixture
def seed(store):
    """Insert a document directly and return its id."""
    def _seed(collection, document):
        return asyncio.run(store.insert(collection, document))["_id"]
    return _seed
