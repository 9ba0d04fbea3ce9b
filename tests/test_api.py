import logging

import pytest
from fastapi.testclient import TestClient

from locallibrary.api import create_app
from locallibrary.config import settings
from locallibrary.database import DocumentId


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["db"] is True


def test_root_redirects_to_catalog(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/"


def test_security_headers(client):
    response = client.get("/catalog/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


@pytest.mark.parametrize("entity", ["author", "book", "genre", "bookinstance"])
def test_malformed_and_absent_ids_are_both_not_found(client, entity):
    absent = client.get(f"/catalog/{entity}/{DocumentId.generate()}")
    malformed = client.get(f"/catalog/{entity}/42")
    assert absent.status_code == malformed.status_code == 404
    assert "not found" in absent.text
    assert "not found" in malformed.text


def test_store_failure_renders_error_page(store, tmp_path):
    client = TestClient(create_app(store))
    store.db_file = str(tmp_path)  # no longer a usable database file
    response = client.get("/catalog/authors")
    assert response.status_code == 500
    assert "The catalog could not be read or updated." in response.text

    health = client.get("/health")
    assert health.json()["db"] is False


def test_create_app_configures_logging(store, monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    create_app(store)
    assert calls == [{"level": settings.log_level}]
