"""
Personal collection package.

A user's own list of books, copied from the catalogue on demand and
edited independently of it.
"""

from .collection import AlreadyExists, CollectionError, NotFound, PersonalCollection  # noqa: F401
from .router import router as collection_router  # noqa: F401
