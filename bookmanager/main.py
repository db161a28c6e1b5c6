# bookmanager/main.py
import logging

from fastapi import FastAPI

from .catalog import catalog_router
from .collection import collection_router
from .config import get_settings


settings = get_settings()
logging.basicConfig(
    level=settings.app.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title=settings.app.name,
    description=(
        "Browse a catalogue of books (search, filter, sort, pages) "
        "and keep a personal list of favourites."
    ),
    version=settings.app.version,
)
app.include_router(catalog_router)
app.include_router(collection_router)


@app.get("/")
def health_check():
    return {"status": "ok", "catalog_source": settings.catalog.source}
