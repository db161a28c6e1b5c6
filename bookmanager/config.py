"""Configuration loader for the Book Manager service."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_SEED_FILE = Path(__file__).resolve().parent / "data" / "sample_books.json"


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Book Manager"
    version: str = "1.0.0"
    log_level: str = "INFO"


class CatalogConfig(BaseModel):
    """Where the catalogue comes from and how it is paged."""

    source: Literal["seed", "openlibrary"] = "seed"
    page_size: int = Field(default=3, ge=1)
    seed_file: Path = DEFAULT_SEED_FILE


class OpenLibraryConfig(BaseModel):
    """Open Library search settings, used when ``catalog.source`` is ``openlibrary``."""

    base_url: str = "https://openlibrary.org"
    timeout: float = 10.0
    limit: int = Field(default=30, ge=1, le=100)
    default_query: str = "classic novels"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    openlibrary: OpenLibraryConfig = Field(default_factory=OpenLibraryConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file. A missing file
            leaves every setting at its default.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment overrides
    source = os.getenv("BOOKMANAGER_CATALOG_SOURCE")
    if source:
        config.catalog = CatalogConfig(**{**config.catalog.model_dump(), "source": source})
    page_size = os.getenv("BOOKMANAGER_PAGE_SIZE")
    if page_size:
        config.catalog = CatalogConfig(**{**config.catalog.model_dump(), "page_size": int(page_size)})
    log_level = os.getenv("BOOKMANAGER_LOG_LEVEL")
    if log_level:
        config.app.log_level = log_level.upper()

    return config


@lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    """Process-wide configuration, loaded once from ``config.yaml``."""
    return load_config(os.getenv("BOOKMANAGER_CONFIG", "config.yaml"))
