"""
Pure catalogue view computation.

``compute_view()`` turns a catalog snapshot and a ``QueryState`` into
the slice of books to display, applying search, filtering, sorting and
pagination in that order. Nothing here keeps state or touches the
source list: the same inputs always give the same page.

The navigation helpers at the bottom encode the caller's side of the
contract: moving between pages stays within ``1..total_pages`` and any
change to the search, filter or sort inputs sends the user back to the
first page.
"""

from __future__ import annotations

import unicodedata
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .schemas import Book, CatalogPage, FilterField, QueryState, SortKey


FieldAccessor = Callable[[Book], str]

# Filtering is always textual, so ``year`` goes through its decimal string.
FIELD_ACCESSORS: Dict[FilterField, FieldAccessor] = {
    FilterField.TITLE: lambda b: b.title,
    FilterField.AUTHOR: lambda b: b.author,
    FilterField.COUNTRY: lambda b: b.country,
    FilterField.LANGUAGE: lambda b: b.language,
    FilterField.YEAR: lambda b: str(b.year),
}

SORT_ACCESSORS: Dict[SortKey, FieldAccessor] = {
    SortKey.TITLE: lambda b: b.title,
    SortKey.AUTHOR: lambda b: b.author,
}

_RESETTING_FIELDS = ("search_text", "filter_field", "filter_value", "sort_key")


def _norm(s: Optional[str]) -> str:
    return (s or "").casefold()


def collation_key(s: str) -> Tuple[str, str]:
    """Sort key approximating a locale-aware string comparison.

    Accents and case are ignored on the first pass so that ``"Émile"``
    sorts next to ``"emile"``. Remaining ties put lowercase before
    uppercase and unaccented before accented letters, as ICU collation
    does; only identical strings compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", s)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), s.swapcase()


def search(books: Sequence[Book], text: str) -> List[Book]:
    needle = _norm(text)
    return [b for b in books if needle in _norm(b.title)]


def apply_filter(books: Sequence[Book], field: FilterField, value: str) -> List[Book]:
    if field is FilterField.ALL:
        return list(books)
    accessor = FIELD_ACCESSORS[field]
    needle = _norm(value)
    return [b for b in books if needle in _norm(accessor(b))]


def sort_books(books: Sequence[Book], key: SortKey) -> List[Book]:
    accessor = SORT_ACCESSORS[key]
    return sorted(books, key=lambda b: collation_key(accessor(b)))


def count_pages(total: int, page_size: int) -> int:
    """Number of pages for ``total`` items; an empty result still has one."""
    return max(1, (total + page_size - 1) // page_size)


def compute_view(catalog: Sequence[Book], state: QueryState) -> CatalogPage:
    """Return the page of ``catalog`` described by ``state``.

    A page past the last one is not an error, it simply has no items.
    Callers must reset ``state.page`` to 1 when the search or filter
    inputs change (see ``refine()``); this function never adjusts it.
    """
    books = search(catalog, state.search_text)
    books = apply_filter(books, state.filter_field, state.filter_value)
    books = sort_books(books, state.sort_key)

    total = len(books)
    start = (state.page - 1) * state.page_size
    end = start + state.page_size
    return CatalogPage(
        page=state.page,
        page_size=state.page_size,
        total=total,
        total_pages=count_pages(total, state.page_size),
        items=books[start:end],
    )


def next_page(state: QueryState, total_pages: int) -> QueryState:
    if state.page < total_pages:
        return state.model_copy(update={"page": state.page + 1})
    return state


def previous_page(state: QueryState) -> QueryState:
    if state.page > 1:
        return state.model_copy(update={"page": state.page - 1})
    return state


def refine(state: QueryState, **changes) -> QueryState:
    """Apply ``changes`` to ``state``, going back to page 1 when needed.

    Changing the search text, filter field, filter value or sort key
    resets the page; changing only ``page`` or ``page_size`` does not.
    Unknown keys raise ``TypeError``.
    """
    unknown = set(changes) - set(QueryState.model_fields)
    if unknown:
        raise TypeError(f"Unknown query state fields: {', '.join(sorted(unknown))}")
    updated = QueryState(**{**state.model_dump(), **changes})
    if any(getattr(updated, f) != getattr(state, f) for f in _RESETTING_FIELDS):
        updated = updated.model_copy(update={"page": 1})
    return updated
