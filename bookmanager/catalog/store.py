"""
Catalog provider for the catalogue API.

``fetch_catalog()`` is the single entry point used by the router: it
returns a plain snapshot of ``Book`` records from either the bundled
seed dataset or Open Library, depending on ``catalog.source`` in the
configuration. Whatever goes wrong while obtaining the records is
logged here and turned into an empty catalogue plus a user-facing
message, so the view computation only ever sees a list of books.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, NamedTuple, Optional

from pydantic import ValidationError

from ..config import AppConfig
from .openlibrary_service import (
    CatalogProviderError,
    get_book_openlibrary,
    search_books_openlibrary,
)
from .schemas import Book


logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "The catalogue is currently unavailable"


class CatalogFetch(NamedTuple):
    books: List[Book]
    error: Optional[str] = None


def load_seed_books(path: Path) -> List[Book]:
    """Load the seed catalogue from a JSON file.

    Parameters
    ----------
    path : Path
        File holding a JSON array of book objects.

    Returns
    -------
    List[Book]
        The books in file order.

    Raises
    ------
    CatalogProviderError
        When the file is missing, is not valid JSON, or an entry does not
        match the ``Book`` schema.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as exc:
        raise CatalogProviderError(f"Cannot read seed catalogue {path}: {exc}") from exc
    if not isinstance(raw, list):
        raise CatalogProviderError(f"Seed catalogue {path} is not a list")
    try:
        return [Book(**entry) for entry in raw]
    except (TypeError, ValidationError) as exc:
        raise CatalogProviderError(f"Invalid book in seed catalogue {path}: {exc}") from exc


def fetch_catalog(settings: AppConfig, q: Optional[str] = None) -> CatalogFetch:
    """Return the current catalogue snapshot.

    ``q`` narrows remote searches; the seed source ignores it because the
    view applies the search itself.
    """
    try:
        if settings.catalog.source == "openlibrary":
            ol = settings.openlibrary
            books = search_books_openlibrary(
                q or ol.default_query,
                limit=ol.limit,
                base_url=ol.base_url,
                timeout=ol.timeout,
            )
        else:
            books = load_seed_books(settings.catalog.seed_file)
    except CatalogProviderError as exc:
        logger.error("Catalogue provider %r failed: %s", settings.catalog.source, exc)
        return CatalogFetch(books=[], error=UNAVAILABLE_MESSAGE)
    return CatalogFetch(books=books)


def find_book(books: List[Book], book_id: int) -> Optional[Book]:
    return next((b for b in books if b.id == book_id), None)


def fetch_book(settings: AppConfig, book_id: int) -> Optional[Book]:
    """Look one book up by id in the configured source.

    Open Library works are fetched by id, so a book reached through any
    search can be found again. A provider failure is logged and reported
    as ``None``, like a missing book.
    """
    if settings.catalog.source != "openlibrary":
        return find_book(fetch_catalog(settings).books, book_id)
    ol = settings.openlibrary
    try:
        return get_book_openlibrary(book_id, base_url=ol.base_url, timeout=ol.timeout)
    except CatalogProviderError as exc:
        logger.error("Open Library lookup of book %s failed: %s", book_id, exc)
        return None
