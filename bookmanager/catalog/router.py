"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET  /books            : search, filter, sort and page the catalogue
- GET  /books/{book_id}  : get one book from the catalogue
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import AppConfig, get_settings
from .schemas import Book, CatalogPage, FilterField, QueryState, SortKey
from .store import fetch_book, fetch_catalog
from .view import compute_view

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/books", response_model=CatalogPage)
def list_books(
    q: str = Query(default="", description="Search text, matched against titles"),
    filter_field: FilterField = Query(default=FilterField.ALL, description="Field to filter on"),
    filter_value: str = Query(default="", description="Text the filtered field must contain"),
    sort: SortKey = Query(default=SortKey.TITLE, description="Sort key"),
    page: int = Query(default=1, ge=1, description="Current page (1-indexed)"),
    settings: AppConfig = Depends(get_settings),
) -> CatalogPage:
    """
    Returns one page of the catalogue.

    The page size is fixed by configuration. Clients are expected to send
    ``page=1`` again whenever ``q``, ``filter_field``, ``filter_value`` or
    ``sort`` change; a page past the end comes back empty.
    """
    state = QueryState(
        search_text=q,
        filter_field=filter_field,
        filter_value=filter_value,
        sort_key=sort,
        page=page,
        page_size=settings.catalog.page_size,
    )
    fetched = fetch_catalog(settings, q=q or None)
    result = compute_view(fetched.books, state)
    if fetched.error:
        result.notice = fetched.error
    return result


@router.get("/books/{book_id}", response_model=Book)
def get_book(book_id: int, settings: AppConfig = Depends(get_settings)) -> Book:
    book = fetch_book(settings, book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book
