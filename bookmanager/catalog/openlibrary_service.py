"""
Open Library integration for the catalogue.

``search_books_openlibrary()`` searches Open Library for works matching
a query and maps each result into the ``Book`` schema. Results are
cached in memory per (query, limit) so that paging through a catalogue
does not repeat the same request. ``get_book_openlibrary()`` looks a
single work up by its numeric id. Only the Python standard library is
used for HTTP requests.

Unlike the seed catalogue, failures here are expected (no network,
rate limiting, unexpected payloads). They are raised as
``CatalogProviderError`` so that ``store.fetch_catalog()`` can log
them and substitute an empty catalogue.
"""

from __future__ import annotations

import http.client
import json
import logging
import re
import urllib.parse
import urllib.request
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from .schemas import Book


logger = logging.getLogger(__name__)


class CatalogProviderError(Exception):
    """The catalogue could not be obtained from its source."""


def _http_get_json(url: str, timeout: float = 10.0) -> dict:
    """Perform an HTTP GET and return the parsed JSON object.

    A custom User-Agent and Accept header are provided to avoid 403
    responses from Open Library. Every failure, from a malformed URL to
    a truncated body, is raised as ``CatalogProviderError``.
    """
    try:
        request = urllib.request.Request(
            url,
            headers={
                'User-Agent': 'bookmanager/1.0 (+https://openlibrary.org/developers/api)',
                'Accept': 'application/json',
            },
        )
        with urllib.request.urlopen(request, timeout=timeout) as response:
            if response.status != 200:
                raise CatalogProviderError(
                    f"Open Library request to {url} returned status {response.status}"
                )
            data = response.read().decode('utf-8', errors='ignore')
    except (OSError, http.client.HTTPException, ValueError) as exc:
        raise CatalogProviderError(f"Error fetching {url}: {exc}") from exc
    try:
        payload = json.loads(data)
    except ValueError as exc:
        raise CatalogProviderError(f"Malformed JSON from {url}") from exc
    if not isinstance(payload, dict):
        raise CatalogProviderError(f"Unexpected payload from {url}")
    return payload


_search_cache: Dict[Tuple[str, int], List[Book]] = {}
_work_cache: Dict[int, Book] = {}
_author_cache: Dict[str, str] = {}

_LANGUAGE_NAMES = {
    'eng': 'English', 'fre': 'French', 'fra': 'French', 'spa': 'Spanish',
    'ita': 'Italian', 'por': 'Portuguese', 'ger': 'German', 'deu': 'German',
    'rus': 'Russian', 'jpn': 'Japanese', 'chi': 'Chinese', 'zho': 'Chinese',
    'kor': 'Korean', 'tur': 'Turkish', 'ara': 'Arabic', 'hin': 'Hindi',
    'per': 'Persian', 'fas': 'Persian', 'dan': 'Danish', 'nor': 'Norwegian',
    'fin': 'Finnish', 'swe': 'Swedish', 'ukr': 'Ukrainian', 'lat': 'Latin',
    'heb': 'Hebrew', 'gre': 'Greek', 'ell': 'Greek', 'grc': 'Greek',
    'hun': 'Hungarian', 'dut': 'Dutch', 'nld': 'Dutch', 'pol': 'Polish',
    'cze': 'Czech', 'ces': 'Czech',
}


def _convert_language(code: Optional[str]) -> str:
    """Convert a three-letter ISO 639-2 code to an English language name.

    Unknown codes are returned unchanged; an empty code gives ``""``.
    """
    if not code:
        return ''
    return _LANGUAGE_NAMES.get(code.lower(), code)


def _work_id(key: str) -> Optional[int]:
    """Extract the numeric part of a work key such as ``/works/OL45883W``."""
    m = re.search(r'OL(\d+)W', key)
    return int(m.group(1)) if m else None


def _str_list(value) -> List[str]:
    """Keep the non-empty strings of a list field; a bare string counts as one item."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [s.strip() for s in value if isinstance(s, str) and s.strip()]


def _first_str(value) -> str:
    items = _str_list(value)
    return items[0] if items else ''


def _doc_to_book(doc: dict) -> Optional[Book]:
    key = doc.get('key')
    title = doc.get('title')
    if not isinstance(key, str) or not isinstance(title, str) or not title:
        return None
    book_id = _work_id(key)
    if book_id is None:
        return None
    year = doc.get('first_publish_year')
    return Book(
        id=book_id,
        title=title,
        author=", ".join(_str_list(doc.get('author_name'))),
        description=_first_str(doc.get('first_sentence')),
        country=_first_str(doc.get('publish_place')),
        language=_convert_language(_first_str(doc.get('language'))),
        year=year if isinstance(year, int) else 0,
    )


def search_books_openlibrary(
    q: Optional[str],
    limit: int = 30,
    base_url: str = "https://openlibrary.org",
    timeout: float = 10.0,
) -> List[Book]:
    """Search Open Library for books.

    Docs without a usable work key or title are skipped, and a work that
    appears twice is only kept once so that ids stay unique within the
    snapshot. Filtering, sorting and paging are done locally by
    ``view.compute_view()``.
    """
    query = (q or '').strip()
    cache_key = (query, limit)
    if cache_key in _search_cache:
        return list(_search_cache[cache_key])

    params = {
        'q': query,
        'limit': max(1, int(limit)),
        'fields': 'key,title,author_name,first_sentence,publish_place,language,first_publish_year',
    }
    url = f"{base_url.rstrip('/')}/search.json?{urllib.parse.urlencode(params)}"
    data = _http_get_json(url, timeout=timeout)
    docs = data.get('docs')
    if not isinstance(docs, list):
        raise CatalogProviderError(f"Open Library response from {url} has no docs")

    books: List[Book] = []
    seen = set()
    for doc in docs:
        if not isinstance(doc, dict):
            continue
        try:
            book = _doc_to_book(doc)
        except ValidationError as exc:
            logger.warning("Skipping Open Library doc %r: %s", doc.get('key'), exc)
            continue
        if book is None or book.id in seen:
            continue
        seen.add(book.id)
        books.append(book)
    logger.info("Open Library returned %d books for %r", len(books), query)
    _search_cache[cache_key] = books
    return list(books)


def _cached_book(book_id: int) -> Optional[Book]:
    for books in _search_cache.values():
        for book in books:
            if book.id == book_id:
                return book
    return None


def _get_author_name(author_key: str, base_url: str, timeout: float) -> Optional[str]:
    """Resolve an author key such as ``/authors/OL23919A`` to a display name."""
    key = author_key.strip().strip('/').split('/')[-1]
    if not key:
        return None
    if key in _author_cache:
        return _author_cache[key]
    url = f"{base_url.rstrip('/')}/authors/{urllib.parse.quote(key)}.json"
    name = _http_get_json(url, timeout=timeout).get('name')
    if not isinstance(name, str):
        return None
    _author_cache[key] = name
    return name


def _work_description(data: dict) -> str:
    desc = data.get('description')
    if isinstance(desc, dict):
        desc = desc.get('value')
    return desc.strip() if isinstance(desc, str) else ''


def get_book_openlibrary(
    book_id: int,
    base_url: str = "https://openlibrary.org",
    timeout: float = 10.0,
) -> Optional[Book]:
    """Return a single work by its numeric id.

    A work already seen in a search result is served from the search
    cache, so it keeps the country and language the search gave it.
    Otherwise ``/works/OL<id>W.json`` is fetched; work records carry no
    publish place or language, so those fields are left empty. Returns
    ``None`` when the payload is not a usable work.
    """
    cached = _cached_book(book_id)
    if cached is not None:
        return cached
    if book_id in _work_cache:
        return _work_cache[book_id]

    url = f"{base_url.rstrip('/')}/works/OL{int(book_id)}W.json"
    data = _http_get_json(url, timeout=timeout)
    title = data.get('title')
    if not isinstance(title, str) or not title:
        return None

    author_names: List[str] = []
    for entry in data.get('authors') or []:
        author = entry.get('author') if isinstance(entry, dict) else None
        key = author.get('key') if isinstance(author, dict) else None
        if isinstance(key, str):
            name = _get_author_name(key, base_url, timeout)
            if name:
                author_names.append(name)

    year = 0
    published = data.get('first_publish_date')
    if isinstance(published, str):
        m = re.search(r'\d{4}', published)
        if m:
            year = int(m.group())

    book = Book(
        id=book_id,
        title=title,
        author=", ".join(author_names),
        description=_work_description(data),
        country='',
        language='',
        year=year,
    )
    _work_cache[book_id] = book
    return book
