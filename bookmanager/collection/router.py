"""
Route definitions for the personal collection API.

Endpoints under /api/collection:
- GET    /books            : list the collection in its current order
- GET    /books/{book_id}  : one entry, e.g. to fill the edit form
- POST   /books            : add a book from the catalogue
- PUT    /books/{book_id}  : replace every field of a book except its id
- DELETE /books/{book_id}  : remove a book (no error if it is absent)

The collection lives in process memory and is shared by every client;
restarting the service empties it. Responses carry the messages the
front-end shows as notifications.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..catalog.schemas import Book, BookFields
from .collection import AlreadyExists, NotFound, PersonalCollection

ADDED_MESSAGE = "Book added to your list"
DUPLICATE_MESSAGE = "This book is already in your list"
UPDATED_MESSAGE = "Book updated successfully"
REMOVED_MESSAGE = "Book removed from your list"
NOT_FOUND_MESSAGE = "This book is not in your list"

router = APIRouter(prefix="/api/collection", tags=["collection"])

_collection = PersonalCollection()


def get_collection() -> PersonalCollection:
    return _collection


class BookUpdated(BaseModel):
    message: str
    book: Book


class BookRemoved(BaseModel):
    message: str
    removed: bool


@router.get("/books", response_model=List[Book])
def list_collection(collection: PersonalCollection = Depends(get_collection)) -> List[Book]:
    return collection.list()


@router.get("/books/{book_id}", response_model=Book)
def get_collection_book(book_id: int, collection: PersonalCollection = Depends(get_collection)) -> Book:
    book = collection.get(book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
    return book


@router.post("/books", status_code=status.HTTP_201_CREATED)
def add_book(book: Book, collection: PersonalCollection = Depends(get_collection)):
    try:
        collection.add(book)
    except AlreadyExists:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_MESSAGE)
    return {"message": ADDED_MESSAGE}


@router.put("/books/{book_id}", response_model=BookUpdated)
def edit_book(
    book_id: int,
    fields: BookFields,
    collection: PersonalCollection = Depends(get_collection),
) -> BookUpdated:
    try:
        book = collection.edit(book_id, fields)
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
    return BookUpdated(message=UPDATED_MESSAGE, book=book)


@router.delete("/books/{book_id}", response_model=BookRemoved)
def delete_book(book_id: int, collection: PersonalCollection = Depends(get_collection)) -> BookRemoved:
    removed = collection.delete(book_id)
    return BookRemoved(
        message=REMOVED_MESSAGE if removed else NOT_FOUND_MESSAGE,
        removed=removed,
    )
