"""
In-memory personal collection of books.

The collection keeps its own ordering, independent from whatever search,
filter or sort the catalogue view is showing, so that a user's edits
survive a catalogue refresh. Books are keyed by ``id``: adding a second
book with an id already present is refused, editing replaces the entry
in place, and deleting a missing id does nothing.

Sync FastAPI endpoints run in a threadpool, so every operation on the
underlying list is serialised with a ``threading.Lock``.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from ..catalog.schemas import Book, BookFields


logger = logging.getLogger(__name__)


class CollectionError(Exception):
    """Base class for personal collection errors."""

    def __init__(self, book_id: int, message: str) -> None:
        super().__init__(message)
        self.book_id = book_id


class AlreadyExists(CollectionError):
    def __init__(self, book_id: int) -> None:
        super().__init__(book_id, f"Book {book_id} is already in the collection")


class NotFound(CollectionError):
    def __init__(self, book_id: int) -> None:
        super().__init__(book_id, f"Book {book_id} is not in the collection")


class PersonalCollection:
    """Ordered set of books keyed by id."""

    def __init__(self, books: Optional[List[Book]] = None) -> None:
        self._books: List[Book] = []
        self._lock = threading.Lock()
        for book in books or []:
            self.add(book)

    def _index(self, book_id: int) -> Optional[int]:
        return next((i for i, b in enumerate(self._books) if b.id == book_id), None)

    def add(self, book: Book) -> None:
        """Append ``book`` to the end of the collection.

        Raises ``AlreadyExists`` when a book with the same id is present,
        whatever its other fields; the collection is left unchanged.
        """
        with self._lock:
            if self._index(book.id) is not None:
                raise AlreadyExists(book.id)
            self._books.append(book)
        logger.info("Added book %s to the collection", book.id)

    def edit(self, book_id: int, fields: BookFields) -> Book:
        """Replace every field of book ``book_id`` except its id.

        The entry keeps its position in the collection. Raises
        ``NotFound`` if no entry has that id.
        """
        updated = Book.with_fields(book_id, fields)
        with self._lock:
            index = self._index(book_id)
            if index is None:
                raise NotFound(book_id)
            self._books[index] = updated
        logger.info("Updated book %s in the collection", book_id)
        return updated

    def delete(self, book_id: int) -> bool:
        """Remove book ``book_id``; return whether anything was removed."""
        with self._lock:
            index = self._index(book_id)
            if index is None:
                logger.debug("Delete of book %s ignored, not in the collection", book_id)
                return False
            del self._books[index]
        logger.info("Removed book %s from the collection", book_id)
        return True

    def get(self, book_id: int) -> Optional[Book]:
        with self._lock:
            index = self._index(book_id)
            return None if index is None else self._books[index]

    def list(self) -> List[Book]:
        """Snapshot of the collection in its current order."""
        with self._lock:
            return list(self._books)

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    def __contains__(self, book_id: object) -> bool:
        with self._lock:
            return any(b.id == book_id for b in self._books)
