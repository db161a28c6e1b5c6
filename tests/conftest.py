"""Shared fixtures for the Book Manager tests."""

import io
import json
import urllib.error

import pytest
from fastapi.testclient import TestClient

from bookmanager.catalog import openlibrary_service
from bookmanager.catalog.schemas import Book
from bookmanager.catalog.store import load_seed_books
from bookmanager.collection import PersonalCollection
from bookmanager.collection.router import get_collection
from bookmanager.config import AppConfig, get_settings
from bookmanager.main import app


@pytest.fixture
def settings() -> AppConfig:
    return AppConfig()


@pytest.fixture
def catalog(settings: AppConfig) -> list[Book]:
    return load_seed_books(settings.catalog.seed_file)


@pytest.fixture
def make_book():
    def _make(book_id: int = 1, **overrides) -> Book:
        data = {
            "id": book_id,
            "title": f"Book {book_id}",
            "author": "Author",
            "description": "A description.",
            "country": "UK",
            "language": "English",
            "year": 1900,
        }
        data.update(overrides)
        return Book(**data)

    return _make


@pytest.fixture
def client(settings: AppConfig):
    collection = PersonalCollection()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_collection] = lambda: collection
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


SAMPLE_RESPONSE = {
    "numFound": 3,
    "docs": [
        {
            "key": "/works/OL468431W",
            "title": "The Great Gatsby",
            "author_name": ["F. Scott Fitzgerald"],
            "first_sentence": ["In my younger and more vulnerable years..."],
            "publish_place": ["New York"],
            "language": ["eng", "fre"],
            "first_publish_year": 1925,
        },
        {"key": "/works/OL1W", "author_name": ["No Title"]},
        {"key": "/works/OL468431W", "title": "The Great Gatsby (duplicate)"},
        {"key": "/works/OL27448W", "title": "The Lord of the Rings"},
    ],
}


class _FakeResponse(io.BytesIO):
    status = 200

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


@pytest.fixture(autouse=True)
def clear_openlibrary_caches():
    caches = (
        openlibrary_service._search_cache,
        openlibrary_service._work_cache,
        openlibrary_service._author_cache,
    )
    for cache in caches:
        cache.clear()
    yield
    for cache in caches:
        cache.clear()


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Replace ``urlopen`` in the Open Library service.

    ``routes`` maps a URL path fragment to the payload served for it;
    any other URL answers 404. Without routes every request gets
    ``payload``.
    """
    calls: list[str] = []

    def install(payload=SAMPLE_RESPONSE, error: Exception | None = None, routes: dict | None = None):
        def _urlopen(request, timeout=None):
            url = request.full_url
            calls.append(url)
            if error is not None:
                raise error
            body = payload
            if routes is not None:
                matches = [v for k, v in routes.items() if k in url]
                if not matches:
                    raise urllib.error.HTTPError(url, 404, "Not Found", None, None)
                body = matches[0]
            data = body if isinstance(body, bytes) else json.dumps(body).encode()
            return _FakeResponse(data)

        monkeypatch.setattr(openlibrary_service.urllib.request, "urlopen", _urlopen)
        return calls

    return install
