"""
Pydantic schema definitions for the catalog module.

The ``Book`` model captures the fields required to render a catalogue
card and an entry of the personal list. ``BookFields`` is the editable
part of a book (everything except its identifier) and is what the edit
form sends back. ``QueryState`` bundles the search, filter, sort and
pagination parameters of a single catalogue view, and ``CatalogPage``
is the paginated result handed to the presentation layer.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FilterField(str, Enum):
    """Book fields the catalogue can be filtered on."""

    ALL = "All"
    TITLE = "title"
    AUTHOR = "author"
    COUNTRY = "country"
    LANGUAGE = "language"
    YEAR = "year"


class SortKey(str, Enum):
    TITLE = "title"
    AUTHOR = "author"


class BookFields(BaseModel):
    """Every field of a book except ``id``.

    ``year`` may be negative to denote a date BCE (e.g. ``-800`` for the
    Odyssey).
    """

    model_config = ConfigDict(frozen=True)

    title: str
    author: str
    description: str
    country: str
    language: str
    year: int


class Book(BookFields):
    """A single book entry.

    Records are immutable; editing a book in the personal list produces
    a new ``Book`` with the same ``id``. Two books are the same entry of
    a collection when their ``id`` matches, whatever their other fields.
    """

    id: int

    @classmethod
    def with_fields(cls, book_id: int, fields: BookFields) -> "Book":
        return cls(id=book_id, **fields.model_dump())

    def to_fields(self) -> BookFields:
        return BookFields(**self.model_dump(exclude={"id"}))


class QueryState(BaseModel):
    """Parameters of one catalogue view computation.

    ``filter_value`` is ignored when ``filter_field`` is ``All``. The page
    is 1-indexed and ``page_size`` is the fixed number of books per page
    taken from the configuration.
    """

    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    filter_field: FilterField = FilterField.ALL
    filter_value: str = ""
    sort_key: SortKey = SortKey.TITLE
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=3, ge=1)


class CatalogPage(BaseModel):
    """A wrapper for paginated results returned from ``/books`` endpoint.

    ``total`` counts the books left after search and filtering, before
    pagination. ``notice`` carries a user-facing message when the catalog
    provider failed and an empty catalog was substituted.
    """

    page: int
    page_size: int
    total: int
    total_pages: int
    items: List[Book]
    notice: Optional[str] = None
