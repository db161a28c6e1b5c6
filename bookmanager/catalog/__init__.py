"""
Catalog package for the book catalogue API.

This package contains the book schemas, the pure view computation that
searches, filters, sorts and pages a catalogue snapshot, the catalogue
providers (bundled seed data or Open Library) and the routes exposing
them. The view never talks to a provider directly: the router fetches a
snapshot first and hands it over as a plain list.
"""

from .router import router as catalog_router  # noqa: F401
